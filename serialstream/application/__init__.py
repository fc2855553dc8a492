"""serialstream/application/__init__.py

Application services: the stream-transfer buffer and the line
configuration it exposes.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from .configuration import PortConfigurator
from .transfer_buffer import SerialStreamBuffer

__all__ = ["PortConfigurator", "SerialStreamBuffer"]
