"""
Environment-driven settings for serialstream.
Path: serialstream/settings.py
Copyright BINGO Collaboration
Last Modified: 2026-10-19
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .domain import ConfigurationError, OpenMode, PortConfiguration

PORT_FIELDS = (
    "baud_rate",
    "character_size",
    "parity",
    "stop_bits",
    "flow_control",
    "vmin",
    "vtime",
)

_OPEN_MODES = {
    "r": OpenMode.READ,
    "w": OpenMode.WRITE,
    "rw": OpenMode.READ_WRITE,
}


class SerialStreamSettings(BaseSettings):
    """Port selection and line parameters.

    Line parameters left as ``None`` are unspecified: the port keeps the
    baseline applied at open time for them.
    """

    device: str = Field(default="/dev/ttyUSB0", description="Device path or pyserial URL")
    mode: str = Field(default="rw", pattern="^(r|w|rw)$")

    baud_rate: Optional[int] = None
    character_size: Optional[int] = None
    parity: Optional[str] = None
    stop_bits: Optional[str] = None
    flow_control: Optional[str] = None
    vmin: Optional[int] = None
    vtime: Optional[int] = None

    debug: bool = Field(default=False)
    logdir: Optional[str] = None

    model_config = {"env_prefix": "SERIALSTREAM_", "case_sensitive": False}

    def port_configuration(self) -> PortConfiguration:
        """Build a :class:`PortConfiguration` from the specified fields only."""

        values = {
            name: getattr(self, name) for name in PORT_FIELDS if getattr(self, name) is not None
        }
        try:
            return PortConfiguration(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid line parameters {values!r}: {exc}") from exc

    def open_mode(self) -> OpenMode:
        return _OPEN_MODES[self.mode]


__all__ = ["SerialStreamSettings", "PORT_FIELDS"]
