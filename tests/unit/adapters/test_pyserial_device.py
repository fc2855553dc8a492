from __future__ import annotations

import pytest
import serial

from serialstream import (
    BaudRate,
    CharacterSize,
    ConfigurationError,
    FlowControl,
    FlushTarget,
    OpenError,
    OpenMode,
    Parity,
    PortConfiguration,
    PySerialDevice,
    ReadError,
    SerialStreamBuffer,
    StopBits,
    WriteError,
)
from serialstream.adapters import PySerialHandle
from serialstream.ports import DevicePort

LOOP_URL = "loop://"


@pytest.fixture
def pyserial_device() -> PySerialDevice:
    return PySerialDevice()


@pytest.fixture
def handle(pyserial_device):
    h = pyserial_device.open(LOOP_URL, OpenMode.READ_WRITE)
    yield h
    pyserial_device.close(h)


def test_pyserial_device_satisfies_device_port(pyserial_device) -> None:
    assert isinstance(pyserial_device, DevicePort)


def test_open_missing_device_raises_open_error(pyserial_device, tmp_path) -> None:
    with pytest.raises(OpenError, match="Cannot open"):
        pyserial_device.open(str(tmp_path / "ttyMISSING"), OpenMode.READ_WRITE)


def test_open_returns_handle_with_live_port(handle) -> None:
    assert isinstance(handle, PySerialHandle)
    assert handle.port.is_open


def test_config_round_trip(pyserial_device, handle) -> None:
    wanted = PortConfiguration(
        baud_rate=BaudRate.BAUD_9600,
        character_size=CharacterSize.CHAR_SIZE_7,
        parity=Parity.PARITY_EVEN,
        stop_bits=StopBits.STOP_BITS_2,
        flow_control=FlowControl.FLOW_CONTROL_SOFTWARE,
        vmin=0,
        vtime=5,
    )
    pyserial_device.set_config(handle, wanted)

    assert pyserial_device.get_config(handle).model_dump() == wanted.model_dump()
    assert handle.port.baudrate == 9600
    assert handle.port.bytesize == serial.SEVENBITS
    assert handle.port.parity == serial.PARITY_EVEN
    assert handle.port.xonxoff and not handle.port.rtscts


def test_default_sentinels_resolve_to_device_defaults(handle) -> None:
    dev = PySerialDevice(
        defaults=PortConfiguration.baseline().model_copy(update={"baud_rate": BaudRate.BAUD_19200})
    )
    dev.set_config(
        handle, PortConfiguration(baud_rate=BaudRate.BAUD_DEFAULT, flow_control="hardware")
    )

    active = dev.get_config(handle)
    assert active.is_resolved
    assert active.baud_rate is BaudRate.BAUD_19200
    assert active.flow_control is FlowControl.FLOW_CONTROL_HARDWARE


def test_set_config_writes_only_requested_fields(pyserial_device, handle) -> None:
    handle.port.parity = serial.PARITY_ODD

    pyserial_device.set_config(handle, PortConfiguration(baud_rate=19200))

    assert handle.port.baudrate == 19200
    assert handle.port.parity == serial.PARITY_ODD


def test_nonstandard_active_rate_is_reported(pyserial_device, handle) -> None:
    handle.port.baudrate = 12345
    with pytest.raises(ConfigurationError):
        pyserial_device.get_config(handle)


def test_setters_recover_from_nonstandard_active_rate() -> None:
    with SerialStreamBuffer(PySerialDevice(), LOOP_URL) as port:
        port.get_file_descriptor().port.baudrate = 12345

        port.set_parity("even")
        assert port.get_file_descriptor().port.baudrate == 12345

        port.set_baud_rate(9600)
        assert port.get_baud_rate() is BaudRate.BAUD_9600
        assert port.get_parity() is Parity.PARITY_EVEN


@pytest.mark.parametrize(
    "vmin, vtime, timeout, inter_byte",
    [
        (0, 0, 0, None),
        (0, 5, 0.5, None),
        (1, 0, None, None),
        (4, 3, None, 0.3),
    ],
)
def test_vmin_vtime_map_to_pyserial_timeouts(
    pyserial_device, handle, vmin, vtime, timeout, inter_byte
) -> None:
    pyserial_device.set_config(handle, PortConfiguration(vmin=vmin, vtime=vtime))

    if timeout is None:
        assert handle.port.timeout is None
    else:
        assert handle.port.timeout == pytest.approx(timeout)
    if inter_byte is None:
        assert handle.port.inter_byte_timeout is None
    else:
        assert handle.port.inter_byte_timeout == pytest.approx(inter_byte)


def test_loop_transfer_and_probe(pyserial_device, handle) -> None:
    assert pyserial_device.raw_write(handle, b"ping") == 4
    assert pyserial_device.poll_available(handle) == 4
    assert pyserial_device.raw_read(handle, 2) == b"pi"
    assert pyserial_device.raw_read(handle, 10) == b"ng"


def test_poll_read_returns_nothing_without_data(pyserial_device, handle) -> None:
    pyserial_device.set_config(handle, PortConfiguration(vmin=0, vtime=0))
    assert pyserial_device.raw_read(handle, 8) == b""


def test_flush_input_discards_pending(pyserial_device, handle) -> None:
    pyserial_device.raw_write(handle, b"stale")
    pyserial_device.flush(handle, FlushTarget.INPUT)
    assert pyserial_device.poll_available(handle) == 0


def test_read_failure_is_translated(pyserial_device, handle, monkeypatch) -> None:
    def broken_read(size: int = 1) -> bytes:
        raise serial.SerialException("device reports readiness to read but returned no data")

    monkeypatch.setattr(handle.port, "read", broken_read)
    handle.port.write(b"x")

    with pytest.raises(ReadError, match="returned no data"):
        pyserial_device.raw_read(handle, 1)


def test_write_failure_is_translated(pyserial_device, handle, monkeypatch) -> None:
    def broken_write(data: bytes) -> int:
        raise serial.SerialTimeoutException("Write timeout")

    monkeypatch.setattr(handle.port, "write", broken_write)

    with pytest.raises(WriteError, match="Write timeout"):
        pyserial_device.raw_write(handle, b"x")


def test_stream_buffer_over_pyserial_loop() -> None:
    cfg = PortConfiguration(
        baud_rate=9600,
        character_size=8,
        parity="none",
        stop_bits="1",
        flow_control="none",
    )
    with SerialStreamBuffer(PySerialDevice(), LOOP_URL, configuration=cfg) as port:
        assert port.get_baud_rate() is BaudRate.BAUD_9600
        assert port.write(bytes([0x41, 0x42, 0x43])) == 3
        assert port.read(3) == bytes([0x41, 0x42, 0x43])


def test_stream_buffer_timed_read_over_pyserial_loop() -> None:
    with SerialStreamBuffer(PySerialDevice(), LOOP_URL) as port:
        port.set_vmin(0)
        port.set_vtime(1)
        assert port.read(4) == b""
        assert port.peek() is None
