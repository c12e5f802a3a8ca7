"""Exception types raised by raillog."""

from __future__ import annotations


class RailLoggerError(Exception):
    """Base class for raillog errors."""


class LaneError(RailLoggerError):
    """Invalid operation on the lane collection."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"lane {index}: {reason}")
