"""serialstream/adapters/__init__.py

Adapters that connect the stream buffer to concrete serial devices.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from .loopback import LoopbackDevice  # noqa: F401
from .pyserial_device import PySerialDevice, PySerialHandle  # noqa: F401

__all__ = [
    "LoopbackDevice",
    "PySerialDevice",
    "PySerialHandle",
]
