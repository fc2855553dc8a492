from __future__ import annotations

import pytest

from serialstream import (
    BaudRate,
    ConfigurationError,
    FlushError,
    FlushTarget,
    LoopbackDevice,
    OpenError,
    OpenMode,
    Parity,
    PortConfiguration,
    ReadError,
)
from serialstream.ports import DevicePort


def test_loopback_satisfies_device_port() -> None:
    assert isinstance(LoopbackDevice(), DevicePort)


def test_open_unknown_identifier() -> None:
    with pytest.raises(OpenError, match="No such device"):
        LoopbackDevice().open("ttyS9", OpenMode.READ_WRITE)


def test_open_busy_line_until_closed() -> None:
    dev = LoopbackDevice()
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    with pytest.raises(OpenError, match="busy"):
        dev.open("loop0", OpenMode.READ)

    dev.close(handle)
    assert not dev.is_held()
    assert dev.open("loop0", OpenMode.READ) != handle


def test_injected_open_failure() -> None:
    dev = LoopbackDevice()
    dev.fail_open = "Permission denied"
    with pytest.raises(OpenError, match="Permission denied"):
        dev.open("loop0", OpenMode.READ_WRITE)


def test_written_bytes_come_back_in_short_chunks() -> None:
    dev = LoopbackDevice(max_transfer=2)
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    assert dev.raw_write(handle, b"abcde") == 2
    assert dev.raw_write(handle, b"cde") == 2
    assert dev.poll_available(handle) == 4
    assert dev.raw_read(handle, 10) == b"ab"
    assert dev.raw_read(handle, 1) == b"c"
    assert dev.written == bytearray(b"abcd")


def test_empty_timed_read_sleeps_vtime(sleeps) -> None:
    dev = LoopbackDevice(sleep=sleeps.append)
    handle = dev.open("loop0", OpenMode.READ_WRITE)
    dev.set_config(handle, PortConfiguration(vmin=0, vtime=3))

    assert dev.raw_read(handle, 4) == b""
    assert sleeps == [pytest.approx(0.3)]


def test_empty_blocking_read_returns_immediately(sleeps) -> None:
    dev = LoopbackDevice(sleep=sleeps.append)
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    assert dev.raw_read(handle, 4) == b""
    assert sleeps == []


def test_flush_reports_nothing_to_flush() -> None:
    dev = LoopbackDevice()
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    with pytest.raises(FlushError) as excinfo:
        dev.flush(handle, FlushTarget.INPUT)
    assert excinfo.value.nothing_to_flush

    dev.inject(b"xyz")
    dev.flush(handle, FlushTarget.BOTH)
    assert dev.pending() == b""


def test_set_config_resolves_device_defaults() -> None:
    defaults = PortConfiguration.baseline().model_copy(
        update={"baud_rate": BaudRate.BAUD_9600, "parity": Parity.PARITY_ODD}
    )
    dev = LoopbackDevice(defaults=defaults)
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    dev.set_config(handle, PortConfiguration(baud_rate=19200, parity="even"))
    dev.set_config(handle, PortConfiguration(baud_rate=BaudRate.BAUD_DEFAULT, vmin=4))

    active = dev.get_config(handle)
    assert active.is_resolved
    assert active.baud_rate is BaudRate.BAUD_9600
    assert active.parity is Parity.PARITY_EVEN
    assert active.vmin == 4


def test_set_config_rejects_unsupported_rate() -> None:
    dev = LoopbackDevice(supported_baud_rates=[9600, 115200])
    handle = dev.open("loop0", OpenMode.READ_WRITE)

    with pytest.raises(ConfigurationError, match="Unsupported baud rate"):
        dev.set_config(handle, PortConfiguration(baud_rate=19200))
    assert dev.get_config(handle).baud_rate is BaudRate.BAUD_115200


def test_stale_handle_is_rejected() -> None:
    dev = LoopbackDevice()
    handle = dev.open("loop0", OpenMode.READ_WRITE)
    dev.close(handle)

    with pytest.raises(ReadError, match="Bad handle"):
        dev.raw_read(handle, 1)


def test_injected_close_failure_still_releases() -> None:
    dev = LoopbackDevice()
    handle = dev.open("loop0", OpenMode.READ_WRITE)
    dev.fail_close = True

    with pytest.raises(OSError):
        dev.close(handle)
    assert not dev.is_held()
    assert dev.closed_handles == [handle]
