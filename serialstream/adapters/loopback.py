"""serialstream/adapters/loopback.py

In-memory loopback implementation of :class:`serialstream.ports.DevicePort`.

Every byte written to a line comes back on the read side of the same
line, which is enough to exercise the stream buffer without hardware.
Short transfers and device failures can be switched on per instance.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable

from ..constants import VTIME_UNIT_S
from ..domain import (
    BaudRate,
    ConfigurationError,
    FlushError,
    FlushTarget,
    OpenError,
    OpenMode,
    PortConfiguration,
    ProbeError,
    ReadError,
    SerialStreamError,
    WriteError,
)


@dataclass
class _LoopbackLine:
    """State of one simulated UART; it outlives the handles opened on it."""

    identifier: str
    configuration: PortConfiguration
    rx: bytearray = field(default_factory=bytearray)
    handle: int | None = None
    mode: OpenMode | None = None


class LoopbackDevice:
    """Loopback serial device for tests and bench setups without hardware.

    Parameters
    ----------
    identifiers:
        Names that :meth:`open` accepts; anything else is "not found".
    defaults:
        Device defaults used to resolve ``*_DEFAULT`` sentinels and as the
        power-on configuration of every line.
    supported_baud_rates:
        Rates accepted by :meth:`set_config`; all standard rates by default.
    max_transfer:
        Upper bound on the bytes moved by one raw read or write, to
        simulate short transfers.
    sleep:
        Called with the VTIME delay when a timed read finds no data.
    """

    def __init__(
        self,
        identifiers: Iterable[str] = ("loop0",),
        *,
        defaults: PortConfiguration | None = None,
        supported_baud_rates: Iterable[int] | None = None,
        max_transfer: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.defaults = defaults or PortConfiguration.baseline()
        if supported_baud_rates is None:
            supported_baud_rates = (b for b in BaudRate if b is not BaudRate.BAUD_DEFAULT)
        self.supported_baud_rates = frozenset(int(b) for b in supported_baud_rates)
        self.max_transfer = max_transfer
        self._sleep = sleep
        self._lines = {name: _LoopbackLine(name, self.defaults) for name in identifiers}
        self._handles: dict[int, _LoopbackLine] = {}
        self._handle_ids = itertools.count(3)

        # failure injection
        self.fail_open: str | None = None
        self.fail_read = False
        self.fail_probe = False
        self.fail_close = False
        self.fail_write_after: int | None = None

        # observation
        self.written = bytearray()
        self.write_sizes: list[int] = []
        self.read_sizes: list[int] = []
        self.set_config_calls: list[PortConfiguration] = []
        self.closed_handles: list[int] = []

    # --- test helpers ------------------------------------------------------

    def inject(self, data: bytes, identifier: str = "loop0") -> None:
        """Make ``data`` arrive on the read side of ``identifier``."""

        self._lines[identifier].rx += data

    def pending(self, identifier: str = "loop0") -> bytes:
        return bytes(self._lines[identifier].rx)

    def is_held(self, identifier: str = "loop0") -> bool:
        return self._lines[identifier].handle is not None

    # --- DevicePort ---------------------------------------------------------

    def open(self, identifier: str, mode: OpenMode) -> int:
        if self.fail_open:
            raise OpenError(self.fail_open)
        line = self._lines.get(identifier)
        if line is None:
            raise OpenError(f"No such device: {identifier}")
        if line.handle is not None:
            raise OpenError(f"Device busy: {identifier}")
        handle = next(self._handle_ids)
        line.handle = handle
        line.mode = mode
        self._handles[handle] = line
        return handle

    def close(self, handle: int) -> None:
        line = self._handles.pop(handle, None)
        if line is not None:
            line.handle = None
            line.mode = None
        self.closed_handles.append(handle)
        if self.fail_close:
            raise OSError(f"close({handle}) failed")

    def raw_read(self, handle: int, max_bytes: int) -> bytes:
        line = self._line(handle, ReadError)
        if self.fail_read:
            raise ReadError(f"read({handle}) failed: I/O error")
        cfg = line.configuration
        if not line.rx:
            # VMIN=0/VTIME>0: the read times out after VTIME deciseconds
            if cfg.vmin == 0 and cfg.vtime > 0:
                self._sleep(cfg.vtime * VTIME_UNIT_S)
            self.read_sizes.append(0)
            return b""
        n = min(max_bytes, len(line.rx), self.max_transfer or max_bytes)
        data = bytes(line.rx[:n])
        del line.rx[:n]
        self.read_sizes.append(n)
        return data

    def raw_write(self, handle: int, data: bytes) -> int:
        line = self._line(handle, WriteError)
        n = min(len(data), self.max_transfer or len(data))
        if self.fail_write_after is not None:
            room = self.fail_write_after - len(self.written)
            if room <= 0:
                raise WriteError(f"write({handle}) failed: device gone")
            n = min(n, room)
        chunk = bytes(data[:n])
        self.written += chunk
        line.rx += chunk
        self.write_sizes.append(n)
        return n

    def poll_available(self, handle: int) -> int:
        line = self._line(handle, ProbeError)
        if self.fail_probe:
            raise ProbeError(f"FIONREAD({handle}) failed")
        return len(line.rx)

    def flush(self, handle: int, which: FlushTarget) -> None:
        line = self._line(handle, FlushError)
        # output is delivered synchronously, so only input can be pending
        if which is FlushTarget.OUTPUT or not line.rx:
            raise FlushError(f"nothing to flush ({which.value})", nothing_to_flush=True)
        line.rx.clear()

    def get_config(self, handle: int) -> PortConfiguration:
        return self._line(handle, ConfigurationError).configuration

    def set_config(self, handle: int, configuration: PortConfiguration) -> None:
        line = self._line(handle, ConfigurationError)
        changes = {name: getattr(configuration, name) for name in configuration.model_fields_set}
        resolved = line.configuration.model_copy(update=changes).resolved(self.defaults)
        if int(resolved.baud_rate) not in self.supported_baud_rates:
            raise ConfigurationError(f"Unsupported baud rate: {int(resolved.baud_rate)}")
        self.set_config_calls.append(resolved)
        line.configuration = resolved

    def _line(self, handle: int, error: type[SerialStreamError]) -> _LoopbackLine:
        line = self._handles.get(handle)
        if line is None:
            raise error(f"Bad handle: {handle}")
        return line


__all__ = ["LoopbackDevice"]
