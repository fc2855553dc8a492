"""Unbuffered byte-stream access to serial ports.

Open a port with :class:`SerialStreamBuffer` on top of a device adapter::

    from serialstream import PySerialDevice, PortConfiguration, SerialStreamBuffer

    cfg = PortConfiguration(baud_rate=9600)
    with SerialStreamBuffer(PySerialDevice(), "/dev/ttyUSB0", configuration=cfg) as port:
        port.write(b"ABC")
        reply = port.read(3)
"""

from .adapters import LoopbackDevice, PySerialDevice
from .application import PortConfigurator, SerialStreamBuffer
from .domain import (
    BaudRate,
    CharacterSize,
    ConfigurationError,
    FlowControl,
    FlushError,
    FlushTarget,
    NotOpenError,
    OpenError,
    OpenMode,
    Parity,
    PortConfiguration,
    ProbeError,
    PutbackError,
    ReadError,
    SerialStreamError,
    StopBits,
    WriteError,
)
from .ports import DevicePort

__version__ = "0.1.0"

__all__ = [
    "SerialStreamBuffer",
    "PortConfigurator",
    "DevicePort",
    "LoopbackDevice",
    "PySerialDevice",
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
