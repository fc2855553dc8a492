"""serialstream/application/config_loader.py

Loader for ``serialstream.cfg`` files.

The file uses the same ``[key]=value`` layout as other instrument
configuration files::

    [device]=/dev/ttyUSB0
    [baudrate]=9600      // line speed
    [parity]=none

Values from the file are overridden by ``SERIALSTREAM_*`` environment
variables, see :class:`serialstream.settings.SerialStreamSettings`.

Copyright BINGO Collaboration
Last modified: 2026-10-19
"""

from __future__ import annotations

import os
import re
from typing import Iterable

from pydantic import ValidationError

from ..domain import ConfigurationError
from ..logging_utils import logprintf
from ..settings import SerialStreamSettings

_KEY_VALUE_RE = re.compile(r"^\[(?P<key>[^\]]+)\]\s*=\s*(?P<value>.*)$")
_DEVICE_COMMENT_RE = re.compile(r"\s+(?://|#)")

_ALIAS_MAP: dict[str, str] = {
    "device": "device",
    "port": "device",
    "comport": "device",
    "mode": "mode",
    "baudrate": "baud_rate",
    "baud_rate": "baud_rate",
    "charactersize": "character_size",
    "character_size": "character_size",
    "databits": "character_size",
    "parity": "parity",
    "stopbits": "stop_bits",
    "stop_bits": "stop_bits",
    "flowcontrol": "flow_control",
    "flow_control": "flow_control",
    "vmin": "vmin",
    "vtime": "vtime",
    "debug": "debug",
    "logpath": "logdir",
    "logdir": "logdir",
}


def _strip_inline_comment(value: str) -> str:
    for sep in ("//", "#"):
        if sep in value:
            value = value.split(sep, 1)[0]
    return value.strip()


def parse_config_lines(lines: Iterable[str]) -> dict[str, str]:
    """Return the recognised ``field -> raw value`` pairs of a cfg file."""

    values: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        m = _KEY_VALUE_RE.match(line)
        if not m:
            continue
        field = _ALIAS_MAP.get(m.group("key").strip().lower())
        if field is None:
            logprintf(3, "Ignoring unknown configuration key %s", m.group("key"))
            continue
        if field == "device":
            # device URLs such as loop:// contain "//"
            value = _DEVICE_COMMENT_RE.split(m.group("value"), maxsplit=1)[0].strip()
        else:
            value = _strip_inline_comment(m.group("value"))
        if value:
            values[field] = value.lower() if field in ("parity", "flow_control", "mode") else value
    return values


def load_config(path: str, *, base_dir: str | None = None) -> SerialStreamSettings:
    """Load :class:`SerialStreamSettings` from a ``serialstream.cfg`` file.

    Parameters
    ----------
    path:
        Path to the configuration file. If it does not exist, defaults
        and environment overrides are returned.
    base_dir:
        Base directory used to resolve a relative ``logdir``, defaults to
        the directory of ``path``.
    """

    if base_dir is None:
        base_dir = os.path.dirname(os.path.abspath(path)) or os.getcwd()

    file_values: dict[str, str] = {}
    if os.path.isfile(path):
        with open(path, "r", encoding="utf-8") as f:
            file_values = parse_config_lines(f)
    else:
        logprintf(3, "Configuration file %s not found, using defaults", path)

    try:
        env_settings = SerialStreamSettings()
        env_values = {name: getattr(env_settings, name) for name in env_settings.model_fields_set}
        cfg = SerialStreamSettings(**{**file_values, **env_values})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc

    if cfg.logdir and not os.path.isabs(cfg.logdir):
        cfg = cfg.model_copy(update={"logdir": os.path.join(base_dir, cfg.logdir)})

    return cfg


__all__ = ["load_config", "parse_config_lines"]
