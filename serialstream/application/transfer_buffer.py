"""serialstream/application/transfer_buffer.py

Unbuffered byte-stream protocol over a raw serial device.

:class:`SerialStreamBuffer` gives a caller stream semantics (bulk read
and write, one byte of look-ahead, putback, availability probing) on top
of a :class:`~serialstream.ports.DevicePort` that only offers raw,
possibly short transfers. Apart from a single look-ahead/putback slot
no data is held back: every request becomes one or more device
transfers, so the timing seen on the line is the timing of the calls.

The buffer owns its device handle exclusively. It cannot be copied or
pickled, and it releases the handle on :meth:`close`, on leaving a
``with`` block, or when garbage collected.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

from typing import Any, Callable

from ..domain import (
    BaudRate,
    CharacterSize,
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
    StopBits,
    WriteError,
)
from ..logging_utils import hexdump, logprintf
from ..ports import DevicePort
from .configuration import PortConfigurator


class SerialStreamBuffer:
    """Stream-transfer layer for one serial port.

    Parameters
    ----------
    device:
        Raw device implementation.
    identifier:
        When given, the port is opened immediately with ``mode`` and
        ``configuration``.
    logger:
        ``logger(level, fmt, *args)`` callable, see
        :func:`serialstream.logging_utils.logprintf`.
    """

    def __init__(
        self,
        device: DevicePort,
        identifier: str | None = None,
        mode: OpenMode = OpenMode.READ_WRITE,
        configuration: PortConfiguration | None = None,
        *,
        logger: Callable[[int, str, object], None] = logprintf,
    ) -> None:
        self._device = device
        self._logger = logger
        self._identifier: str | None = None
        self._handle: Any = None
        self._mode: OpenMode | None = None
        self._configurator: PortConfigurator | None = None
        self._pushback: int | None = None
        if identifier is not None:
            self.open(identifier, mode, configuration)

    # --- ownership -----------------------------------------------------------

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} owns a device handle and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} owns a device handle and cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError(f"{type(self).__name__} owns a device handle and cannot be pickled")

    def __enter__(self) -> SerialStreamBuffer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_handle", None) is not None:
            self.close()

    def __repr__(self) -> str:
        state = f"open {self._identifier!r}" if self.is_open else "closed"
        return f"<{type(self).__name__} {state}>"

    # --- lifecycle -----------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(
        self,
        identifier: str,
        mode: OpenMode = OpenMode.READ_WRITE,
        configuration: PortConfiguration | None = None,
    ) -> None:
        """Acquire ``identifier`` and apply its line parameters.

        The baseline from :meth:`set_default_serial_port_parameters` is
        applied first, then every field explicitly set on
        ``configuration``. On failure the handle is released and the
        buffer stays closed.
        """

        if self.is_open:
            raise OpenError(f"Already open on {self._identifier}")

        handle = self._device.open(identifier, mode)
        configurator = PortConfigurator(self._device, handle, self._logger)
        try:
            configurator.set_default_serial_port_parameters()
            if configuration is not None:
                configurator.set_configuration(configuration)
        except Exception:
            self._logger(0, "Configuring %s failed, releasing handle", identifier)
            self._release(handle)
            raise

        self._identifier = identifier
        self._handle = handle
        self._mode = mode
        self._configurator = configurator
        self._pushback = None
        self._logger(2, "Opened %s", identifier)

    def close(self) -> None:
        """Release the device handle; safe to call on a closed buffer."""

        if self._handle is None:
            return
        handle, identifier = self._handle, self._identifier
        self._handle = None
        self._identifier = None
        self._mode = None
        self._configurator = None
        self._pushback = None
        self._release(handle)
        self._logger(2, "Closed %s", identifier)

    def _release(self, handle: Any) -> None:
        try:
            self._device.close(handle)
        except Exception as e:
            self._logger(1, "Closing device handle failed: %s", e)

    def get_file_descriptor(self) -> Any:
        """Return the raw device handle; it stays owned by this buffer."""

        self._require_open()
        return self._handle

    @property
    def file_descriptor(self) -> Any:
        return self.get_file_descriptor()

    def setbuf(self, *_args: object) -> SerialStreamBuffer:
        """Kept for streambuf parity; the buffer is always unbuffered."""

        return self

    # --- configuration ---------------------------------------------------------

    def get_configuration(self) -> PortConfiguration:
        return self._config().get_configuration()

    def set_configuration(self, configuration: PortConfiguration) -> None:
        self._config().set_configuration(configuration)

    def set_default_serial_port_parameters(self) -> None:
        self._config().set_default_serial_port_parameters()

    def set_baud_rate(self, baud_rate: BaudRate | int) -> None:
        self._config().set_baud_rate(baud_rate)

    def get_baud_rate(self) -> BaudRate:
        return self._config().get_baud_rate()

    def set_character_size(self, character_size: CharacterSize | int) -> None:
        self._config().set_character_size(character_size)

    def get_character_size(self) -> CharacterSize:
        return self._config().get_character_size()

    def set_parity(self, parity: Parity | str) -> None:
        self._config().set_parity(parity)

    def get_parity(self) -> Parity:
        return self._config().get_parity()

    def set_number_of_stop_bits(self, stop_bits: StopBits | str) -> None:
        self._config().set_number_of_stop_bits(stop_bits)

    def get_number_of_stop_bits(self) -> StopBits:
        return self._config().get_number_of_stop_bits()

    def set_flow_control(self, flow_control: FlowControl | str) -> None:
        self._config().set_flow_control(flow_control)

    def get_flow_control(self) -> FlowControl:
        return self._config().get_flow_control()

    def set_vmin(self, vmin: int) -> None:
        self._config().set_vmin(vmin)

    def get_vmin(self) -> int:
        return self._config().get_vmin()

    def set_vtime(self, vtime: int) -> None:
        self._config().set_vtime(vtime)

    def get_vtime(self) -> int:
        return self._config().get_vtime()

    # --- flushing and probing ---------------------------------------------------

    def flush_input_buffer(self) -> None:
        self._flush(FlushTarget.INPUT)

    def flush_output_buffer(self) -> None:
        self._flush(FlushTarget.OUTPUT)

    def flush_io_buffers(self) -> None:
        self._flush(FlushTarget.BOTH)

    def _flush(self, which: FlushTarget) -> None:
        handle = self._require_open()
        if which is not FlushTarget.OUTPUT:
            # the look-ahead byte is unread input too
            self._pushback = None
        try:
            self._device.flush(handle, which)
        except FlushError as e:
            if not e.nothing_to_flush:
                raise
            self._logger(3, "Nothing to flush (%s) on %s", which.value, self._identifier)

    def in_avail(self) -> int:
        """Number of bytes readable without blocking, look-ahead included."""

        handle = self._require_open()
        held = 0 if self._pushback is None else 1
        return held + self._device.poll_available(handle)

    def is_data_available(self) -> bool:
        return self.in_avail() > 0

    # --- writing -----------------------------------------------------------------

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write all of ``data``, returning the number of bytes transferred.

        Short device writes are continued until everything is out. If
        the device fails after some bytes went out, the count so far is
        returned; a failure before the first byte raises ``WriteError``.
        """

        handle = self._require_writable()
        view = memoryview(data).cast("B")
        total = len(view)
        written = 0
        while written < total:
            try:
                n = self._device.raw_write(handle, bytes(view[written:]))
            except WriteError as e:
                if written == 0:
                    raise
                self._logger(
                    1,
                    "Write to %s failed after %d of %d bytes: %s",
                    self._identifier,
                    written,
                    total,
                    e,
                )
                break
            if n <= 0:
                self._logger(
                    1,
                    "Device %s accepted no data, %d of %d bytes written",
                    self._identifier,
                    written,
                    total,
                )
                break
            written += n
        if written:
            self._logger(3, "TX %s: %s", self._identifier, hexdump(bytes(view[:written])))
        return written

    def write_byte(self, value: int) -> int | None:
        """Send one byte immediately; ``None`` signals a failed write."""

        handle = self._require_writable()
        byte = _as_byte(value)
        try:
            n = self._device.raw_write(handle, bytes((byte,)))
        except WriteError as e:
            self._logger(1, "Write of 0x%02X to %s failed: %s", byte, self._identifier, e)
            return None
        if n != 1:
            return None
        self._logger(3, "TX %s: %02X", self._identifier, byte)
        return byte

    # --- reading -----------------------------------------------------------------

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Fill ``buffer`` from the port and return the number of bytes read.

        A held look-ahead byte is delivered first. After a short device
        read, reading continues only while the device reports more
        input, so the call never waits for bytes that have not arrived.
        """

        handle = self._require_readable()
        view = memoryview(buffer).cast("B")
        size = len(view)
        count = 0
        if size and self._pushback is not None:
            view[0] = self._pushback
            self._pushback = None
            count = 1

        while count < size:
            want = size - count
            try:
                chunk = self._device.raw_read(handle, want)
            except ReadError as e:
                if count == 0:
                    raise
                self._logger(
                    1, "Read from %s failed after %d bytes: %s", self._identifier, count, e
                )
                break
            if not chunk:
                break
            view[count : count + len(chunk)] = chunk
            count += len(chunk)
            if len(chunk) < want and not self._more_pending(handle):
                break

        if count:
            self._logger(3, "RX %s: %s", self._identifier, hexdump(bytes(view[:count])))
        return count

    def read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError(f"read size must be >= 0, got {size}")
        buf = bytearray(size)
        n = self.readinto(buf)
        return bytes(buf[:n])

    def peek(self) -> int | None:
        """Return the next byte without consuming it, or ``None`` if no data."""

        handle = self._require_readable()
        if self._pushback is None:
            chunk = self._device.raw_read(handle, 1)
            if not chunk:
                return None
            self._logger(3, "RX %s: %02X", self._identifier, chunk[0])
            self._pushback = chunk[0]
        return self._pushback

    def read_byte(self) -> int | None:
        """Consume and return the next byte, or ``None`` if no data."""

        handle = self._require_readable()
        if self._pushback is not None:
            byte, self._pushback = self._pushback, None
            return byte
        chunk = self._device.raw_read(handle, 1)
        if not chunk:
            return None
        self._logger(3, "RX %s: %02X", self._identifier, chunk[0])
        return chunk[0]

    def putback(self, value: int) -> int:
        """Push one byte back so the next read delivers it first.

        Only one byte can be held; pushing a second one before the first
        is read raises ``PutbackError`` instead of losing data.
        """

        self._require_open()
        byte = _as_byte(value)
        if self._pushback is not None:
            raise PutbackError(
                f"Cannot put back 0x{byte:02X}: 0x{self._pushback:02X} is still pending"
            )
        self._pushback = byte
        return byte

    # --- internals -----------------------------------------------------------

    def _require_open(self) -> Any:
        if self._handle is None:
            raise NotOpenError("Serial port is not open")
        return self._handle

    def _require_readable(self) -> Any:
        handle = self._require_open()
        if not self._mode & OpenMode.READ:
            raise ReadError(f"{self._identifier} was not opened for reading")
        return handle

    def _require_writable(self) -> Any:
        handle = self._require_open()
        if not self._mode & OpenMode.WRITE:
            raise WriteError(f"{self._identifier} was not opened for writing")
        return handle

    def _config(self) -> PortConfigurator:
        self._require_open()
        assert self._configurator is not None
        return self._configurator

    def _more_pending(self, handle: Any) -> bool:
        try:
            return self._device.poll_available(handle) > 0
        except ProbeError as e:
            self._logger(3, "Probe on %s failed, ending read: %s", self._identifier, e)
            return False


def _as_byte(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ValueError(f"Not a byte value: {value!r}")
    return value


__all__ = ["SerialStreamBuffer"]
