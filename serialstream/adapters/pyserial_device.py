"""serialstream/adapters/pyserial_device.py

OS-backed :class:`serialstream.ports.DevicePort` built on pyserial.

Ports are created with :func:`serial.serial_for_url`, so plain device
paths (``/dev/ttyUSB0``, ``COM3``) as well as pyserial URLs such as
``loop://`` are accepted. pyserial drives the termios VMIN/VTIME fields
itself, so the non-canonical read rules are reproduced here on top of
``timeout``/``inter_byte_timeout`` and the size of each read.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

from dataclasses import dataclass

import serial

from ..constants import BASELINE_VMIN, BASELINE_VTIME, VTIME_UNIT_S
from ..domain import (
    BaudRate,
    CharacterSize,
    ConfigurationError,
    FlowControl,
    FlushError,
    FlushTarget,
    OpenError,
    OpenMode,
    Parity,
    PortConfiguration,
    ProbeError,
    ReadError,
    StopBits,
    WriteError,
)

_BYTESIZES = {
    CharacterSize.CHAR_SIZE_5: serial.FIVEBITS,
    CharacterSize.CHAR_SIZE_6: serial.SIXBITS,
    CharacterSize.CHAR_SIZE_7: serial.SEVENBITS,
    CharacterSize.CHAR_SIZE_8: serial.EIGHTBITS,
}

_PARITIES = {
    Parity.PARITY_NONE: serial.PARITY_NONE,
    Parity.PARITY_ODD: serial.PARITY_ODD,
    Parity.PARITY_EVEN: serial.PARITY_EVEN,
}

_STOPBITS = {
    StopBits.STOP_BITS_1: serial.STOPBITS_ONE,
    StopBits.STOP_BITS_1_5: serial.STOPBITS_ONE_POINT_FIVE,
    StopBits.STOP_BITS_2: serial.STOPBITS_TWO,
}


@dataclass
class PySerialHandle:
    """Handle returned by :meth:`PySerialDevice.open`.

    ``port`` is the live pyserial object; it can be used for control
    lines (``dtr``/``rts``) but must not be closed directly.
    """

    port: serial.SerialBase
    vmin: int = BASELINE_VMIN
    vtime: int = BASELINE_VTIME

    def fileno(self) -> int:
        return self.port.fileno()


class PySerialDevice:
    """Serial device backed by pyserial."""

    def __init__(
        self,
        *,
        defaults: PortConfiguration | None = None,
        exclusive: bool = True,
    ) -> None:
        self.defaults = defaults or PortConfiguration.baseline()
        self.exclusive = exclusive

    def open(self, identifier: str, mode: OpenMode) -> PySerialHandle:
        try:
            port = serial.serial_for_url(identifier, do_not_open=True)
            port.exclusive = self.exclusive
            port.open()
        except (serial.SerialException, ValueError, OSError) as exc:
            raise OpenError(f"Cannot open {identifier}: {exc}") from exc

        handle = PySerialHandle(port=port)
        try:
            self._apply_read_timing(handle)
        except ConfigurationError:
            port.close()
            raise
        return handle

    def close(self, handle: PySerialHandle) -> None:
        handle.port.close()

    def raw_read(self, handle: PySerialHandle, max_bytes: int) -> bytes:
        port = handle.port
        try:
            # VMIN>0 blocks for VMIN bytes; otherwise take what is there
            size = min(max_bytes, max(handle.vmin, 1, port.in_waiting))
            return port.read(size)
        except (serial.SerialException, OSError) as exc:
            raise ReadError(f"Read from {port.port} failed: {exc}") from exc

    def raw_write(self, handle: PySerialHandle, data: bytes) -> int:
        port = handle.port
        try:
            written = port.write(data)
        except (serial.SerialException, OSError) as exc:
            raise WriteError(f"Write to {port.port} failed: {exc}") from exc
        return len(data) if written is None else written

    def poll_available(self, handle: PySerialHandle) -> int:
        try:
            return handle.port.in_waiting
        except (serial.SerialException, OSError) as exc:
            raise ProbeError(f"Cannot query {handle.port.port}: {exc}") from exc

    def flush(self, handle: PySerialHandle, which: FlushTarget) -> None:
        port = handle.port
        try:
            if which in (FlushTarget.INPUT, FlushTarget.BOTH):
                port.reset_input_buffer()
            if which in (FlushTarget.OUTPUT, FlushTarget.BOTH):
                port.reset_output_buffer()
        except (serial.SerialException, OSError) as exc:
            raise FlushError(f"Flush of {port.port} failed: {exc}") from exc

    def get_config(self, handle: PySerialHandle) -> PortConfiguration:
        port = handle.port
        try:
            return PortConfiguration(
                baud_rate=BaudRate(port.baudrate),
                character_size=_lookup(_BYTESIZES, port.bytesize),
                parity=_lookup(_PARITIES, port.parity),
                stop_bits=_lookup(_STOPBITS, port.stopbits),
                flow_control=_flow_control(port),
                vmin=handle.vmin,
                vtime=handle.vtime,
            )
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported setting on {port.port}: {exc}") from exc

    def set_config(self, handle: PySerialHandle, configuration: PortConfiguration) -> None:
        fields = configuration.model_fields_set
        cfg = configuration.resolved(self.defaults)
        port = handle.port
        try:
            if "baud_rate" in fields:
                port.baudrate = int(cfg.baud_rate)
            if "character_size" in fields:
                port.bytesize = _BYTESIZES[cfg.character_size]
            if "parity" in fields:
                port.parity = _PARITIES[cfg.parity]
            if "stop_bits" in fields:
                port.stopbits = _STOPBITS[cfg.stop_bits]
            if "flow_control" in fields:
                port.rtscts = cfg.flow_control is FlowControl.FLOW_CONTROL_HARDWARE
                port.xonxoff = cfg.flow_control is FlowControl.FLOW_CONTROL_SOFTWARE
        except (serial.SerialException, ValueError) as exc:
            raise ConfigurationError(f"{port.port} rejected {cfg!r}: {exc}") from exc
        if "vmin" in fields:
            handle.vmin = cfg.vmin
        if "vtime" in fields:
            handle.vtime = cfg.vtime
        self._apply_read_timing(handle)

    @staticmethod
    def _apply_read_timing(handle: PySerialHandle) -> None:
        port = handle.port
        delay = handle.vtime * VTIME_UNIT_S if handle.vtime else None
        try:
            if handle.vmin == 0:
                # VTIME bounds the whole read, 0 means poll
                port.timeout = delay or 0
                port.inter_byte_timeout = None
            else:
                # VTIME is an inter-byte timer armed by the first byte
                port.timeout = None
                port.inter_byte_timeout = delay
        except (serial.SerialException, ValueError) as exc:
            raise ConfigurationError(f"{port.port} rejected read timing: {exc}") from exc


def _lookup(table: dict, native: object):
    for key, value in table.items():
        if value == native:
            return key
    raise ValueError(f"no mapping for {native!r}")


def _flow_control(port: serial.SerialBase) -> FlowControl:
    if port.rtscts:
        return FlowControl.FLOW_CONTROL_HARDWARE
    if port.xonxoff:
        return FlowControl.FLOW_CONTROL_SOFTWARE
    return FlowControl.FLOW_CONTROL_NONE


__all__ = ["PySerialDevice", "PySerialHandle"]
