"""Command-line interface for serialstream.

This thin wrapper parses CLI options, loads ``serialstream.cfg`` (see
:mod:`serialstream.application.config_loader`), opens the port through
pyserial and performs one write and/or read. Received bytes are printed
as hex on stdout.

Examples::

    serialstream --device /dev/ttyUSB0 --baud 9600 --write 414243 --read 3
    serialstream --device loop:// --text hello --read 5
"""

from __future__ import annotations

import argparse
import os
from typing import Sequence

from .adapters import PySerialDevice
from .application import SerialStreamBuffer
from .application.config_loader import load_config
from .domain import SerialStreamError
from .logging_utils import logprintf, set_debug, setup_file_logging


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serialstream", description="Write to and read from a serial port"
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        default="serialstream.cfg",
        help="Path to serialstream.cfg configuration file (default: ./serialstream.cfg)",
    )
    parser.add_argument("-d", "--device", metavar="DEV", help="Device path or pyserial URL")
    parser.add_argument("-b", "--baud", type=int, help="Baud rate")
    parser.add_argument("--vmin", type=int, help="Minimum bytes per read (0-255)")
    parser.add_argument("--vtime", type=int, help="Read timeout in deciseconds (0-255)")
    parser.add_argument("-w", "--write", metavar="HEX", help="Bytes to send, as hex")
    parser.add_argument("-t", "--text", help="Text to send, UTF-8 encoded")
    parser.add_argument("-r", "--read", metavar="N", type=int, default=0, help="Bytes to read")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point used by the ``serialstream`` script."""

    parser = _build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    payload = b""
    if args.write:
        try:
            payload = bytes.fromhex(args.write)
        except ValueError:
            parser.error(f"--write expects hex digits, got {args.write!r}")
    if args.text:
        payload += args.text.encode("utf-8")

    try:
        cfg = load_config(os.path.abspath(args.config))
        overrides = {
            key: value
            for key, value in (
                ("device", args.device),
                ("baud_rate", args.baud),
                ("vmin", args.vmin),
                ("vtime", args.vtime),
            )
            if value is not None
        }
        if overrides:
            cfg = cfg.model_copy(update=overrides)

        set_debug(args.debug or cfg.debug)
        if cfg.logdir:
            setup_file_logging(cfg.logdir)

        with SerialStreamBuffer(
            PySerialDevice(), cfg.device, cfg.open_mode(), cfg.port_configuration()
        ) as port:
            if payload:
                written = port.write(payload)
                logprintf(2, "Wrote %d of %d bytes to %s", written, len(payload), cfg.device)
            if args.read > 0:
                data = port.read(args.read)
                print(data.hex(" ").upper())
    except SerialStreamError as exc:
        logprintf(0, "%s", exc)
        return 1

    return 0
