"""Line-parameter limits and baseline values.

The baseline mirrors the "known good" settings applied by
:meth:`SerialStreamBuffer.set_default_serial_port_parameters`, which are
also applied on every open before the caller's own parameters.
"""

BASELINE_BAUD_RATE: int = 115200
BASELINE_CHARACTER_SIZE: int = 8
BASELINE_PARITY: str = "none"
BASELINE_STOP_BITS: str = "1"
BASELINE_FLOW_CONTROL: str = "none"
BASELINE_VMIN: int = 1
BASELINE_VTIME: int = 0

# termios cc_t range
VMIN_MAX: int = 255
VTIME_MAX: int = 255

# VTIME is expressed in deciseconds
VTIME_UNIT_S: float = 0.1

HEXDUMP_MAX_BYTES: int = 64
