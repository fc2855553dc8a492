"""serialstream/domain/errors.py

Exception taxonomy shared by the buffer, the configurator and the
device adapters.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations


class SerialStreamError(Exception):
    """Base class for every failure reported by :mod:`serialstream`."""


class NotOpenError(SerialStreamError):
    """An operation that needs an open port was attempted while closed."""


class OpenError(SerialStreamError):
    """The device could not be acquired (missing, busy, permission)."""


class ConfigurationError(SerialStreamError):
    """A line parameter is outside its domain or was rejected by the device."""


class ReadError(SerialStreamError):
    """Unrecoverable device-level read failure."""


class WriteError(SerialStreamError):
    """Unrecoverable device-level write failure."""


class ProbeError(SerialStreamError):
    """The number of pending input bytes could not be determined."""


class FlushError(SerialStreamError):
    """Discarding input and/or output failed at the device level.

    ``nothing_to_flush`` is set by devices that report an empty queue as
    an error; callers treat that case as a no-op.
    """

    def __init__(self, message: str = "", *, nothing_to_flush: bool = False) -> None:
        super().__init__(message)
        self.nothing_to_flush = nothing_to_flush


class PutbackError(SerialStreamError):
    """A byte was pushed back while another one was still pending."""


__all__ = [
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
