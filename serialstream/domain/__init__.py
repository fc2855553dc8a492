"""serialstream/domain/__init__.py

Domain models and error types for serial line streams.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from .errors import (
    ConfigurationError,
    FlushError,
    NotOpenError,
    OpenError,
    ProbeError,
    PutbackError,
    ReadError,
    SerialStreamError,
    WriteError,
)
from .models import (
    BaudRate,
    CharacterSize,
    FlowControl,
    FlushTarget,
    OpenMode,
    Parity,
    PortConfiguration,
    StopBits,
)

__all__ = [
    "BaudRate",
    "CharacterSize",
    "Parity",
    "StopBits",
    "FlowControl",
    "OpenMode",
    "FlushTarget",
    "PortConfiguration",
    "SerialStreamError",
    "NotOpenError",
    "OpenError",
    "ConfigurationError",
    "ReadError",
    "WriteError",
    "ProbeError",
    "FlushError",
    "PutbackError",
]
