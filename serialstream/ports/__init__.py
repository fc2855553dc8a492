"""serialstream/ports/__init__.py

Hexagonal architecture ports (abstract interfaces).

The stream buffer never touches an operating system handle itself: every
transfer, probe and configuration call goes through the
:class:`DevicePort` defined here. Adapters in :mod:`serialstream.adapters`
provide concrete implementations of this port.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..domain import FlushTarget, OpenMode, PortConfiguration


@runtime_checkable
class DevicePort(Protocol):
    """Raw serial endpoint used by :class:`SerialStreamBuffer`.

    Handles returned by :meth:`open` are opaque to the caller. Reads and
    writes may transfer fewer bytes than requested; that is never an
    error. Concrete implementations:
    :class:`serialstream.adapters.pyserial_device.PySerialDevice` and
    :class:`serialstream.adapters.loopback.LoopbackDevice`.
    """

    def open(self, identifier: str, mode: OpenMode) -> Any:  # pragma: no cover - structural
        """Acquire the device, raising ``OpenError`` on failure."""

    def close(self, handle: Any) -> None:  # pragma: no cover - structural
        """Release a handle previously returned by :meth:`open`."""

    def raw_read(self, handle: Any, max_bytes: int) -> bytes:  # pragma: no cover - structural
        """Return up to ``max_bytes`` bytes, possibly none (``ReadError``)."""

    def raw_write(self, handle: Any, data: bytes) -> int:  # pragma: no cover - structural
        """Write a prefix of ``data`` and return its length (``WriteError``)."""

    def poll_available(self, handle: Any) -> int:  # pragma: no cover - structural
        """Return the number of bytes readable without blocking (``ProbeError``)."""

    def flush(self, handle: Any, which: FlushTarget) -> None:  # pragma: no cover - structural
        """Discard pending input and/or output (``FlushError``)."""

    def get_config(self, handle: Any) -> PortConfiguration:  # pragma: no cover - structural
        """Return the configuration active on the device, fully resolved."""

    def set_config(
        self, handle: Any, configuration: PortConfiguration
    ) -> None:  # pragma: no cover - structural
        """Apply the fields set on ``configuration`` (``ConfigurationError``).

        Only ``configuration.model_fields_set`` is written; other parameters
        keep their active value. ``*_DEFAULT`` sentinels resolve to the
        device defaults.
        """


__all__ = ["DevicePort"]
