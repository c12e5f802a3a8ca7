"""
Colorizer for raillog.

Maps an elapsed-time level or a named severity to a string decorator
that wraps text in 256-color ANSI escape codes. Levels at or below zero,
and unknown severity names, map to the identity decorator.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

Decorator = Callable[[str], str]
LevelFunction = Callable[[float, Any], int]
Colorizer = Callable[[int | str], Decorator]

RESET = "\x1b[0m"

# Width of one level step in milliseconds.
LEVEL_STEP_MS = 50


def rgb(r: int, g: int, b: int) -> str:
    """Return the foreground escape for a point of the 6x6x6 color cube.

    Args:
        r: Red component, 0-5.
        g: Green component, 0-5.
        b: Blue component, 0-5.
    """
    for component in (r, g, b):
        if not 0 <= component <= 5:
            raise ValueError(f"Color component out of range 0-5: {component}")
    return f"\x1b[38;5;{16 + 36 * r + 6 * g + b}m"


@dataclass(frozen=True)
class Palette:
    """Fixed colors shared by every logger in the process."""

    spacer: str
    info: str
    warning: str
    error: str
    fatal: str

    @property
    def severities(self) -> Mapping[str, str]:
        return MappingProxyType(
            {
                "info": self.info,
                "warning": self.warning,
                "error": self.error,
                "fatal": self.fatal,
            }
        )


PALETTE = Palette(
    spacer=rgb(1, 1, 1),
    info=rgb(0, 3, 5),
    warning=rgb(5, 5, 0),
    error=rgb(5, 2, 0),
    fatal=rgb(5, 0, 0),
)

SEVERITIES: Mapping[str, str] = PALETTE.severities


def identity(text: str) -> str:
    return text


def paint(code: str) -> Decorator:
    """Return a decorator wrapping text in *code* and a reset."""

    def decorate(text: str) -> str:
        if not text:
            return text
        return f"{code}{text}{RESET}"

    return decorate


def default_level(elapsed_ms: float, context: Any = None) -> int:
    """Level for *elapsed_ms*: one step per 50 ms, starting at -1.

    Anything under 100 ms is at or below zero and stays uncolored.
    """
    return math.floor(elapsed_ms / LEVEL_STEP_MS) - 1


def ramp(level: int) -> str:
    """Escape code for a positive *level*.

    Runs from yellow at level 1 to red at level 6 and stays red beyond.
    """
    green = max(6 - level, 0)
    return rgb(5, min(green, 5), 0)


def default_colorizer(level: int | str) -> Decorator:
    """Return the decorator for a numeric level or a severity name.

    Unknown severity names are not an error: they decorate nothing.
    """
    if isinstance(level, str):
        code = SEVERITIES.get(level)
        return paint(code) if code is not None else identity
    if level <= 0:
        return identity
    return paint(ramp(level))


def plain_colorizer(level: int | str) -> Decorator:
    """Colorizer used when colors are switched off."""
    return identity
