"""
Rail logger entry point.

``RailLogger`` is the middleware callable: ``await rail_logger(context,
operation)`` runs *operation* inside a ``RequestSession``. All sessions
of one logger share its lane collection, renderer and reporter.
``create_logger`` builds one from ``Settings`` plus code-only options.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from raillog.colors import Colorizer, LevelFunction, default_colorizer, default_level
from raillog.config import Settings, get_settings
from raillog.logging import configure_logging
from raillog.render import LineRenderer
from raillog.reporter import Reporter, get_reporter
from raillog.session import Operation, RequestSession
from raillog.slots import SlotAllocator

logger = structlog.get_logger(__name__)

Width = int | Callable[[], int] | None
PathSelector = Callable[[Any], str]


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


def terminal_width() -> int:
    """Current terminal width in columns (80 when unknown)."""
    return shutil.get_terminal_size().columns


def default_path(context: Any) -> str:
    return getattr(context, "path", "")


class RailLogger:
    """Concurrent request logger drawing one rail lane per in-flight request.

    Args:
        min_slots: Lanes allocated up front.
        width: Fixed line width, a zero-argument width provider, or
            ``None``/``0`` to disable wrapping.
        timestamp: Show the wall clock instead of durations.
        slim: Join rail glyphs without separators.
        colors: Emit ANSI color codes.
        get_level: Maps ``(elapsed_ms, context)`` to a color level.
        colorizer: Maps a level or severity name to a decorator.
        open_path: Selects the path printed on open lines.
        close_path: Selects the path printed on close lines.
        reporter: Receives each rendered, newline-terminated line.
        clock: Monotonic clock in milliseconds.
        wall_clock: Wall clock used in timestamp mode.
    """

    def __init__(
        self,
        *,
        min_slots: int = 3,
        width: Width = terminal_width,
        timestamp: bool = False,
        slim: bool = False,
        colors: bool = True,
        get_level: LevelFunction = default_level,
        colorizer: Colorizer = default_colorizer,
        open_path: PathSelector = default_path,
        close_path: PathSelector = default_path,
        reporter: Reporter | None = None,
        clock: Callable[[], float] = monotonic_ms,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.slots = SlotAllocator(min_slots)
        self.renderer = LineRenderer(
            get_level=get_level,
            colorizer=colorizer,
            colors=colors,
            slim=slim,
            timestamp=timestamp,
        )
        self.width = width
        self.open_path = open_path
        self.close_path = close_path
        self.reporter: Reporter = reporter if reporter is not None else get_reporter()
        self.clock = clock
        self.wall_clock = wall_clock

    async def __call__(self, context: Any, operation: Operation) -> Any:
        """Log *operation* as one session and return its result; its failure is re-raised."""
        return await RequestSession(self, context).run(operation)

    def resolve_width(self) -> int | None:
        """Current line width, or ``None`` when wrapping is disabled."""
        width = self.width() if callable(self.width) else self.width
        return width or None

    def report(self, line: str) -> None:
        self.reporter(line + "\n")


def create_logger(settings: Settings | None = None, **overrides: Any) -> RailLogger:
    """Build a ``RailLogger`` from *settings* and keyword *overrides*.

    Scalar options default to ``get_settings()``; an unset width follows
    the terminal. Overrides win over settings and may supply the
    code-only options (``get_level``, ``colorizer``, ``reporter``, ...).
    Applies ``configure_logging`` unless the host already configured
    structlog.
    """
    settings = settings or get_settings()
    if not structlog.is_configured():
        configure_logging(settings.log_level)

    options: dict[str, Any] = {
        "min_slots": settings.min_slots,
        "width": terminal_width if settings.width is None else settings.width,
        "timestamp": settings.timestamp,
        "slim": settings.slim,
        "colors": settings.colors,
        "reporter": get_reporter(settings.reporter),
    }
    options.update(overrides)
    logger.debug("rail_logger_created", min_slots=options["min_slots"])
    return RailLogger(**options)
