"""
Lane allocation for raillog.

Keeps an ordered, index-addressed collection of lanes. Each lane is
either empty (``None``) or holds the start timestamp, in milliseconds,
of the session that owns it. The collection grows by one lane whenever
every lane is taken and never shrinks.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from raillog.exceptions import LaneError

logger = structlog.get_logger(__name__)


class SlotAllocator:
    """Growable collection of lanes shared by every session of a logger.

    Only mutated at session start (``acquire`` + ``occupy``) and session
    end (``release``). Both happen synchronously, so no lock is needed
    under cooperative scheduling.

    Args:
        min_slots: Number of empty lanes allocated up front.
    """

    def __init__(self, min_slots: int = 3) -> None:
        if min_slots < 0:
            raise ValueError("min_slots must be >= 0")
        self._lanes: list[float | None] = [None] * min_slots

    # ── public API ──

    def acquire(self) -> int:
        """Return the smallest empty lane index, growing by one lane if none is empty."""
        for index, start in enumerate(self._lanes):
            if start is None:
                return index
        self._lanes.append(None)
        logger.debug("lane_grown", lanes=len(self._lanes))
        return len(self._lanes) - 1

    def occupy(self, index: int, timestamp: float) -> None:
        """Mark lane *index* as owned by a session started at *timestamp*."""
        self._check(index)
        if self._lanes[index] is not None:
            raise LaneError(index, "already occupied")
        self._lanes[index] = timestamp

    def release(self, index: int) -> None:
        """Empty lane *index* so the next ``acquire`` may reuse it."""
        self._check(index)
        if self._lanes[index] is None:
            raise LaneError(index, "already empty")
        self._lanes[index] = None

    def start_time(self, index: int) -> float | None:
        """Start timestamp of lane *index*, or ``None`` when empty."""
        self._check(index)
        return self._lanes[index]

    @property
    def active(self) -> int:
        """Number of occupied lanes."""
        return sum(1 for start in self._lanes if start is not None)

    def __len__(self) -> int:
        return len(self._lanes)

    def __iter__(self) -> Iterator[float | None]:
        return iter(self._lanes)

    # ── internal ──

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._lanes):
            raise LaneError(index, f"out of range (lanes={len(self._lanes)})")
