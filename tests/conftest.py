"""Shared pytest fixtures for the serialstream test suite.

Copyright BINGO Collaboration
Last Modified: 2026-10-19
"""

from __future__ import annotations

import os

import pytest

from serialstream import LoopbackDevice, SerialStreamBuffer


class LogCapture:
    """Callable with the ``logger(level, fmt, *args)`` signature."""

    def __init__(self) -> None:
        self.records: list[tuple[int, str]] = []

    def __call__(self, level: int, fmt: str, *args: object) -> None:
        self.records.append((level, fmt % args if args else fmt))

    def messages(self, level: int) -> list[str]:
        return [msg for lvl, msg in self.records if lvl == level]


@pytest.fixture(autouse=True)
def _clean_serialstream_env(monkeypatch):
    """Keep SERIALSTREAM_* variables from the developer shell out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("SERIALSTREAM_"):
            monkeypatch.delenv(key)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def device(sleeps) -> LoopbackDevice:
    return LoopbackDevice(sleep=sleeps.append)


@pytest.fixture
def logs() -> LogCapture:
    return LogCapture()


@pytest.fixture
def port(device, logs):
    buf = SerialStreamBuffer(device, "loop0", logger=logs)
    yield buf
    buf.close()
