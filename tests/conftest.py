"""Shared fixtures for raillog unit tests."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

import pytest

from raillog.logger import RailLogger

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI color escapes from *text*."""
    return _ANSI.sub("", text)


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class LineSink:
    """Reporter collecting rendered lines without their trailing newline."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        assert line.endswith("\n")
        self.lines.append(line[:-1])

    @property
    def plain(self) -> list[str]:
        return [strip_ansi(line) for line in self.lines]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sink() -> LineSink:
    return LineSink()


@pytest.fixture()
def make_logger(clock: FakeClock, sink: LineSink) -> Callable[..., RailLogger]:
    """Factory for a deterministic ``RailLogger``: one lane, no wrapping, no colors."""

    def _make(**overrides: Any) -> RailLogger:
        options: dict[str, Any] = {
            "min_slots": 1,
            "width": None,
            "colors": False,
            "reporter": sink,
            "clock": clock,
        }
        options.update(overrides)
        return RailLogger(**options)

    return _make
