"""serialstream/domain/models.py

Typed line parameters for a serial port.

Every enumeration carries a ``*_DEFAULT`` sentinel meaning "whatever the
device considers its default". Sentinels only live in requests: devices
resolve them when a configuration is applied, so a configuration read
back from a device is always concrete.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

from enum import Enum, Flag, IntEnum

from pydantic import BaseModel, ConfigDict, Field

from ..constants import (
    BASELINE_BAUD_RATE,
    BASELINE_CHARACTER_SIZE,
    BASELINE_FLOW_CONTROL,
    BASELINE_PARITY,
    BASELINE_STOP_BITS,
    BASELINE_VMIN,
    BASELINE_VTIME,
    VMIN_MAX,
    VTIME_MAX,
)
from .errors import ConfigurationError


class BaudRate(IntEnum):
    BAUD_50 = 50
    BAUD_75 = 75
    BAUD_110 = 110
    BAUD_134 = 134
    BAUD_150 = 150
    BAUD_200 = 200
    BAUD_300 = 300
    BAUD_600 = 600
    BAUD_1200 = 1200
    BAUD_1800 = 1800
    BAUD_2400 = 2400
    BAUD_4800 = 4800
    BAUD_9600 = 9600
    BAUD_19200 = 19200
    BAUD_38400 = 38400
    BAUD_57600 = 57600
    BAUD_115200 = 115200
    BAUD_230400 = 230400
    BAUD_460800 = 460800
    BAUD_500000 = 500000
    BAUD_576000 = 576000
    BAUD_921600 = 921600
    BAUD_1000000 = 1000000
    BAUD_1152000 = 1152000
    BAUD_1500000 = 1500000
    BAUD_2000000 = 2000000
    BAUD_2500000 = 2500000
    BAUD_3000000 = 3000000
    BAUD_3500000 = 3500000
    BAUD_4000000 = 4000000
    BAUD_DEFAULT = -1


class CharacterSize(IntEnum):
    CHAR_SIZE_5 = 5
    CHAR_SIZE_6 = 6
    CHAR_SIZE_7 = 7
    CHAR_SIZE_8 = 8
    CHAR_SIZE_DEFAULT = -1


class Parity(str, Enum):
    PARITY_NONE = "none"
    PARITY_ODD = "odd"
    PARITY_EVEN = "even"
    PARITY_DEFAULT = "default"


class StopBits(str, Enum):
    STOP_BITS_1 = "1"
    STOP_BITS_1_5 = "1.5"
    STOP_BITS_2 = "2"
    STOP_BITS_DEFAULT = "default"


class FlowControl(str, Enum):
    FLOW_CONTROL_NONE = "none"
    FLOW_CONTROL_HARDWARE = "hardware"
    FLOW_CONTROL_SOFTWARE = "software"
    FLOW_CONTROL_DEFAULT = "default"


class OpenMode(Flag):
    """Directions requested when a port is opened."""

    READ = 1
    WRITE = 2
    READ_WRITE = READ | WRITE


class FlushTarget(Enum):
    INPUT = "input"
    OUTPUT = "output"
    BOTH = "both"


# field name -> "use the device default" sentinel
_SENTINELS: dict[str, Enum] = {
    "baud_rate": BaudRate.BAUD_DEFAULT,
    "character_size": CharacterSize.CHAR_SIZE_DEFAULT,
    "parity": Parity.PARITY_DEFAULT,
    "stop_bits": StopBits.STOP_BITS_DEFAULT,
    "flow_control": FlowControl.FLOW_CONTROL_DEFAULT,
}


class PortConfiguration(BaseModel):
    """Negotiable line parameters of a serial port.

    Attributes
    ----------
    baud_rate:
        One of the standard rates, or ``BAUD_DEFAULT``.
    character_size:
        Data bits per character (5 to 8), or ``CHAR_SIZE_DEFAULT``.
    parity, stop_bits, flow_control:
        Framing and handshake selection, each with a ``*_DEFAULT`` member.
    vmin:
        Minimum number of bytes a non-canonical read waits for (0-255).
    vtime:
        Non-canonical read timeout in tenths of a second (0-255).
    """

    model_config = ConfigDict(frozen=True)

    baud_rate: BaudRate = BaudRate.BAUD_DEFAULT
    character_size: CharacterSize = CharacterSize.CHAR_SIZE_DEFAULT
    parity: Parity = Parity.PARITY_DEFAULT
    stop_bits: StopBits = StopBits.STOP_BITS_DEFAULT
    flow_control: FlowControl = FlowControl.FLOW_CONTROL_DEFAULT
    vmin: int = Field(default=BASELINE_VMIN, ge=0, le=VMIN_MAX)
    vtime: int = Field(default=BASELINE_VTIME, ge=0, le=VTIME_MAX)

    @classmethod
    def baseline(cls) -> PortConfiguration:
        """115200 baud, 8N1, no flow control, VMIN=1, VTIME=0."""

        return cls(
            baud_rate=BaudRate(BASELINE_BAUD_RATE),
            character_size=CharacterSize(BASELINE_CHARACTER_SIZE),
            parity=Parity(BASELINE_PARITY),
            stop_bits=StopBits(BASELINE_STOP_BITS),
            flow_control=FlowControl(BASELINE_FLOW_CONTROL),
            vmin=BASELINE_VMIN,
            vtime=BASELINE_VTIME,
        )

    @property
    def is_resolved(self) -> bool:
        return all(getattr(self, name) is not sentinel for name, sentinel in _SENTINELS.items())

    def resolved(self, defaults: PortConfiguration) -> PortConfiguration:
        """Replace every ``*_DEFAULT`` sentinel with the value from ``defaults``."""

        if not defaults.is_resolved:
            raise ConfigurationError("device defaults must not contain default sentinels")
        update = {
            name: getattr(defaults, name)
            for name, sentinel in _SENTINELS.items()
            if getattr(self, name) is sentinel
        }
        return self.model_copy(update=update) if update else self


__all__ = [
    "BaudRate",
    "CharacterSize",
    "Parity",
    "StopBits",
    "FlowControl",
    "OpenMode",
    "FlushTarget",
    "PortConfiguration",
]
