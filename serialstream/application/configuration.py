"""serialstream/application/configuration.py

Line-parameter getters and setters bound to one open device handle.

Nothing is cached here: every getter asks the device, and every setter
hands the device only the field it changes, so the other active
parameters are never read back or rewritten.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import ValidationError

from ..domain import (
    BaudRate,
    CharacterSize,
    ConfigurationError,
    FlowControl,
    Parity,
    PortConfiguration,
    StopBits,
)
from ..ports import DevicePort


class PortConfigurator:
    """Apply and query :class:`PortConfiguration` fields on ``handle``."""

    def __init__(
        self,
        device: DevicePort,
        handle: Any,
        logger: Callable[[int, str, object], None],
    ) -> None:
        self._device = device
        self._handle = handle
        self._logger = logger

    # --- whole configuration ---------------------------------------------

    def get_configuration(self) -> PortConfiguration:
        return self._device.get_config(self._handle)

    def set_configuration(self, configuration: PortConfiguration) -> None:
        """Apply the fields explicitly set on ``configuration``.

        Fields left at their model default are not touched, so
        ``PortConfiguration(baud_rate=9600)`` only changes the rate.
        """

        changes = {name: getattr(configuration, name) for name in configuration.model_fields_set}
        if changes:
            self._apply(**changes)

    def set_default_serial_port_parameters(self) -> None:
        baseline = PortConfiguration.baseline()
        self._device.set_config(self._handle, baseline)
        self._logger(3, "Applied default line parameters: %s", _describe(baseline))

    # --- individual fields -----------------------------------------------

    def set_baud_rate(self, baud_rate: BaudRate | int) -> None:
        self._apply(baud_rate=baud_rate)

    def get_baud_rate(self) -> BaudRate:
        return self.get_configuration().baud_rate

    def set_character_size(self, character_size: CharacterSize | int) -> None:
        self._apply(character_size=character_size)

    def get_character_size(self) -> CharacterSize:
        return self.get_configuration().character_size

    def set_parity(self, parity: Parity | str) -> None:
        self._apply(parity=parity)

    def get_parity(self) -> Parity:
        return self.get_configuration().parity

    def set_number_of_stop_bits(self, stop_bits: StopBits | str) -> None:
        self._apply(stop_bits=stop_bits)

    def get_number_of_stop_bits(self) -> StopBits:
        return self.get_configuration().stop_bits

    def set_flow_control(self, flow_control: FlowControl | str) -> None:
        self._apply(flow_control=flow_control)

    def get_flow_control(self) -> FlowControl:
        return self.get_configuration().flow_control

    def set_vmin(self, vmin: int) -> None:
        self._apply(vmin=vmin)

    def get_vmin(self) -> int:
        return self.get_configuration().vmin

    def set_vtime(self, vtime: int) -> None:
        self._apply(vtime=vtime)

    def get_vtime(self) -> int:
        return self.get_configuration().vtime

    # --- internals -----------------------------------------------------------

    def _apply(self, **changes: object) -> None:
        try:
            requested = PortConfiguration.model_validate(changes)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid line parameter {changes!r}: {exc}") from exc
        self._device.set_config(self._handle, requested)
        self._logger(3, "Applied line parameters: %s", _describe_fields(requested))


def _describe(cfg: PortConfiguration) -> str:
    return (
        f"{int(cfg.baud_rate)} baud, {int(cfg.character_size)} bits, "
        f"parity={cfg.parity.value}, stop={cfg.stop_bits.value}, "
        f"flow={cfg.flow_control.value}, vmin={cfg.vmin}, vtime={cfg.vtime}"
    )


def _describe_fields(cfg: PortConfiguration) -> str:
    parts = []
    for name in sorted(cfg.model_fields_set):
        value = getattr(cfg, name)
        parts.append(f"{name}={getattr(value, 'value', value)}")
    return ", ".join(parts)


__all__ = ["PortConfigurator"]
