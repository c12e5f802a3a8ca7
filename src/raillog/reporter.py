"""
Output sinks for rendered lines.

A reporter receives one fully rendered, newline-terminated line per
call. Any callable with that shape works; ``StreamReporter`` writes to a
text stream.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class Reporter(Protocol):
    """Sink for rendered lines."""

    def __call__(self, line: str) -> None: ...


class StreamReporter:
    """Write lines to a text stream and flush after each one.

    Args:
        stream: Explicit stream. When omitted the ``sys`` stream named by
            *name* is looked up on every write, so redirection of
            ``sys.stdout`` (e.g. by pytest's ``capsys``) is honored.
        name: ``"stdout"`` or ``"stderr"``.
    """

    def __init__(self, stream: TextIO | None = None, name: str = "stdout") -> None:
        if name not in ("stdout", "stderr"):
            raise ValueError(f"Unknown stream name: {name!r}")
        self._stream = stream
        self._name = name

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else getattr(sys, self._name)

    def __call__(self, line: str) -> None:
        stream = self.stream
        stream.write(line)
        stream.flush()


def get_reporter(name: str = "stdout") -> StreamReporter:
    """Return a reporter bound to the process stream called *name*."""
    return StreamReporter(name=name)
