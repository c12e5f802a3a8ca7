"""
Line rendering for raillog.

Composes one output line from three parts joined by single spaces:

* a metadata column of fixed width (status, arrow, method, time),
* the rail: one glyph per lane, shaded by how long its session has run,
* a message fragment.

Trailing whitespace is trimmed from every composed line.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from raillog.colors import (
    PALETTE,
    Colorizer,
    Decorator,
    LevelFunction,
    default_colorizer,
    default_level,
    identity,
    paint,
    plain_colorizer,
)
from raillog.formatting import MessageLine

# ── glyphs ──

SPACER = "┈"
RAIL = "│"
OPEN = "┬"
JOIN = "├"
CLOSE = "┴"
OPEN_ARROW = "⇾"
CLOSE_ARROW = "⇽"

# ── column widths ──

STATUS_WIDTH = 3
METHOD_WIDTH = 7
DURATION_WIDTH = 5
CLOCK_WIDTH = 8

FAILED_STATUS = "ERR"
MISSING_STATUS = "---"


class LineKind(str, Enum):
    """Position of a rendered line within its session."""

    OPEN = "open"
    LOG = "log"
    CLOSE = "close"


def format_duration(elapsed_ms: float) -> str:
    """Format *elapsed_ms* so it never exceeds ``DURATION_WIDTH`` characters.

    Below one second the duration is whole milliseconds (``999ms``).
    From one second up it is seconds, with as many decimals as fit
    (``1.00s``, ``12.3s``, ``999s``, ``1000s``).
    """
    ms = int(elapsed_ms)
    if ms < 1000:
        return f"{ms}ms"
    seconds = ms / 1000
    for decimals in (2, 1):
        text = f"{seconds:.{decimals}f}s"
        if len(text) <= DURATION_WIDTH:
            return text
    return f"{seconds:.0f}s"


def classify_status(status: int | None, failed: bool = False) -> str | None:
    """Severity name for a response *status*, or ``None`` for unformatted.

    1xx info, 2xx unformatted, 3xx warning, 4xx error, 5xx and failures fatal.
    """
    if failed:
        return "fatal"
    if status is None:
        return None
    if status >= 500:
        return "fatal"
    if status >= 400:
        return "error"
    if status >= 300:
        return "warning"
    if 100 <= status < 200:
        return "info"
    return None


def fit(text: str, width: int) -> str:
    """Truncate or right-pad *text* with spaces to exactly *width* characters."""
    return text[:width].ljust(width)


class LineRenderer:
    """Render open, log and close lines for the sessions of one logger.

    Args:
        get_level: Maps ``(elapsed_ms, context)`` to a level.
        colorizer: Maps a level or severity name to a decorator.
        colors: When false every decoration, spacers included, is dropped.
        slim: Join rail glyphs without a separator.
        timestamp: Show the wall clock instead of the duration.
    """

    def __init__(
        self,
        *,
        get_level: LevelFunction = default_level,
        colorizer: Colorizer = default_colorizer,
        colors: bool = True,
        slim: bool = False,
        timestamp: bool = False,
    ) -> None:
        self.get_level = get_level
        self.colorizer = colorizer if colors else plain_colorizer
        self.slim = slim
        self.timestamp = timestamp
        self._dim: Decorator = paint(PALETTE.spacer) if colors else identity

    # ── widths ──

    @property
    def time_width(self) -> int:
        return CLOCK_WIDTH if self.timestamp else DURATION_WIDTH

    @property
    def meta_width(self) -> int:
        """Visible width of the metadata column."""
        # "SSS ⇾ METHOD_ TTTTT"
        return STATUS_WIDTH + 3 + METHOD_WIDTH + 1 + self.time_width

    def rail_width(self, lanes: int) -> int:
        """Visible width of a rail over *lanes* lanes."""
        if lanes <= 0:
            return 0
        return lanes if self.slim else 2 * lanes - 1

    def message_width(self, width: int | None, lanes: int) -> int | None:
        """Room left for the message on a line *width* characters wide.

        ``None`` when wrapping is disabled or no room is left.
        """
        if not width:
            return None
        # Two single spaces join meta, rail and message.
        room = width - (self.meta_width + 2) - self.rail_width(lanes)
        return room if room > 0 else None

    # ── colors ──

    def shade(self, elapsed_ms: float, context: Any = None) -> Decorator:
        """Decorator for a lane that has been open for *elapsed_ms*."""
        return self.colorizer(self.get_level(elapsed_ms, context))

    def severity(self, name: str | None) -> Decorator:
        """Decorator for a severity name; ``None`` is unformatted."""
        if name is None:
            return identity
        return self.colorizer(name)

    # ── rail ──

    def rail(
        self,
        lanes: Iterable[float | None],
        now: float,
        owner: int,
        marker: str,
        owner_start: float,
        context: Any = None,
    ) -> str:
        """Render the rail at *now*, with *marker* in the *owner* lane.

        Other lanes are shaded by their live elapsed time; the owner lane
        is shaded by the elapsed time since *owner_start*, except the open
        marker which is always plain.
        """
        glyphs = []
        for index, start in enumerate(lanes):
            if index == owner:
                if marker == OPEN:
                    glyphs.append(marker)
                else:
                    glyphs.append(self.shade(now - owner_start, context)(marker))
            elif start is None:
                glyphs.append(self._dim(SPACER))
            else:
                glyphs.append(self.shade(now - start, context)(RAIL))
        separator = "" if self.slim else self._dim(SPACER)
        return separator.join(glyphs)

    # ── metadata column ──

    def open_meta(self, method: str, wall: datetime | None = None) -> str:
        return " ".join([
            self._dim(SPACER * STATUS_WIDTH),
            OPEN_ARROW,
            fit(method, METHOD_WIDTH),
            self._time_column(wall),
        ])

    def blank_meta(self) -> str:
        return " " * self.meta_width

    def override_meta(self, text: str) -> str:
        return fit(text, self.meta_width)

    def close_meta(
        self,
        method: str,
        status: int | None,
        elapsed_ms: float,
        *,
        failed: bool = False,
        wall: datetime | None = None,
        context: Any = None,
    ) -> str:
        if failed:
            status_text = FAILED_STATUS
        elif status is None:
            status_text = MISSING_STATUS
        else:
            status_text = str(status)
        status_text = self.severity(classify_status(status, failed))(
            fit(status_text, STATUS_WIDTH)
        )

        if self.timestamp and wall is not None:
            time_text = self._time_column(wall)
        else:
            duration = format_duration(elapsed_ms)
            pad = self._dim(SPACER * (DURATION_WIDTH - len(duration)))
            time_text = pad + self.shade(elapsed_ms, context)(duration)

        return " ".join([status_text, CLOSE_ARROW, fit(method, METHOD_WIDTH), time_text])

    def _time_column(self, wall: datetime | None) -> str:
        if self.timestamp and wall is not None:
            return fit(wall.strftime("%H:%M:%S"), CLOCK_WIDTH)
        return self._dim(SPACER * self.time_width)

    # ── lines ──

    @staticmethod
    def marker(kind: LineKind, fragment: MessageLine) -> str:
        """Owner-lane glyph for *fragment* of a line of *kind*."""
        if kind is LineKind.OPEN:
            return OPEN if fragment.first else RAIL
        if kind is LineKind.CLOSE:
            return CLOSE if fragment.last else RAIL
        return JOIN if fragment.first else RAIL

    @staticmethod
    def compose(meta: str, rail: str, message: str) -> str:
        """Join the three parts with single spaces and trim trailing whitespace."""
        return " ".join([meta, rail, message]).rstrip()
