"""
Request sessions for raillog.

A ``RequestSession`` covers one middleware invocation:

    START -> RUNNING -> RESOLVED | FAILED -> CLOSED

It acquires a lane and renders the open line synchronously, hands a
``LogHandle`` to the downstream operation through the context, awaits
that operation (the only suspension point), renders the close line and
releases the lane. The lane is released exactly once on every exit
path; downstream failures are logged at fatal severity and re-raised
unchanged.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from raillog import metrics
from raillog.colors import Decorator, identity
from raillog.exceptions import RailLoggerError
from raillog.formatting import format_message, wrap
from raillog.render import LineKind

if TYPE_CHECKING:
    from raillog.logger import RailLogger

logger = structlog.get_logger(__name__)

Operation = Callable[[], Awaitable[Any]]


class SessionState(str, Enum):
    """Lifecycle states of a request session."""

    START = "start"
    RUNNING = "running"
    RESOLVED = "resolved"
    FAILED = "failed"
    CLOSED = "closed"


@dataclass
class RequestContext:
    """Per-request data shared between the logger and the downstream operation.

    The downstream operation may change any field; ``status`` is usually
    set once the response is known. ``log`` is attached when the session
    opens.
    """

    method: str = ""
    path: str = ""
    status: int | None = None
    log: LogHandle | None = field(default=None, repr=False, compare=False)


class LogHandle:
    """Logging handle bound to one session's lane.

    ``log(...)`` writes plain text; ``info``/``warning``/``error``/``fatal``
    colorize the message with the matching severity color. Every call
    renders immediately, reading the other lanes as they are right now.
    """

    def __init__(self, session: RequestSession) -> None:
        self._session = session

    def __call__(self, *args: Any, meta: str | None = None) -> None:
        self._session.emit(args, meta=meta)

    def info(self, *args: Any, meta: str | None = None) -> None:
        self._session.emit(args, severity="info", meta=meta)

    def warning(self, *args: Any, meta: str | None = None) -> None:
        self._session.emit(args, severity="warning", meta=meta)

    def error(self, *args: Any, meta: str | None = None) -> None:
        self._session.emit(args, severity="error", meta=meta)

    def fatal(self, *args: Any, meta: str | None = None) -> None:
        self._session.emit(args, severity="fatal", meta=meta)


class RequestSession:
    """Lifecycle of one middleware invocation on *rail_logger*.

    Args:
        rail_logger: Owner of the lane collection, renderer and reporter.
        context: Request data; receives the ``LogHandle`` as ``context.log``.
    """

    def __init__(self, rail_logger: RailLogger, context: Any) -> None:
        self._logger = rail_logger
        self.context = context
        self.state = SessionState.START
        self.slot: int | None = None
        self.start: float = 0.0
        self.error: BaseException | None = None
        self.handle = LogHandle(self)

    async def run(self, operation: Operation) -> Any:
        """Run *operation* inside this session and return its result.

        A failure of *operation* is re-raised unchanged.
        """
        self._open()
        try:
            result = await operation()
        except Exception as exc:
            self._fail(exc)
            raise
        except BaseException as exc:
            # Cancellation: close the lane without a fatal log line.
            self.state = SessionState.FAILED
            self.error = exc
            raise
        else:
            self.state = SessionState.RESOLVED
        finally:
            self._close()
        return result

    def emit(
        self,
        args: tuple[Any, ...],
        *,
        severity: str | None = None,
        meta: str | None = None,
    ) -> None:
        """Render a log message in this session's lane."""
        if self.state in (SessionState.START, SessionState.CLOSED):
            raise RailLoggerError(f"cannot log in a {self.state.value} session")
        renderer = self._logger.renderer
        first_meta = renderer.override_meta(meta) if meta is not None else None
        self._render(
            LineKind.LOG,
            format_message(args),
            self._logger.clock(),
            first_meta=first_meta,
            decorate=renderer.severity(severity),
        )

    # ── transitions ──

    def _open(self) -> None:
        slots = self._logger.slots
        self.slot = slots.acquire()
        self.start = self._logger.clock()
        slots.occupy(self.slot, self.start)
        metrics.sessions_active.inc()
        metrics.lanes.set(len(slots))
        logger.debug("session_opened", lane=self.slot, lanes=len(slots))

        try:
            self.context.log = self.handle
            renderer = self._logger.renderer
            wall = self._logger.wall_clock() if renderer.timestamp else None
            self._render(
                LineKind.OPEN,
                str(self._logger.open_path(self.context)),
                self.start,
                first_meta=renderer.open_meta(str(self.context.method), wall),
            )
        except BaseException:
            self._release()
            raise
        self.state = SessionState.RUNNING

    def _fail(self, exc: Exception) -> None:
        self.state = SessionState.FAILED
        self.error = exc
        logger.debug(
            "session_failed",
            lane=self.slot,
            method=getattr(self.context, "method", None),
            error=type(exc).__name__,
        )
        try:
            self.handle.fatal(exc)
        except Exception:
            # Keep the downstream failure as the one that propagates.
            logger.exception("failure_log_render_failed", lane=self.slot)

    def _close(self) -> None:
        end = self._logger.clock()
        elapsed = end - self.start
        failed = self.state is SessionState.FAILED
        try:
            renderer = self._logger.renderer
            wall = self._logger.wall_clock() if renderer.timestamp else None
            meta = renderer.close_meta(
                str(self.context.method),
                self._status(),
                elapsed,
                failed=failed,
                wall=wall,
                context=self.context,
            )
            self._render(
                LineKind.CLOSE,
                str(self._logger.close_path(self.context)),
                end,
                first_meta=meta,
            )
        except Exception:
            if self.error is None:
                raise
            # Keep the downstream failure as the one that propagates.
            logger.exception("close_render_failed", lane=self.slot)
        finally:
            self._release()
            metrics.sessions_total.labels(
                outcome="failed" if failed else "resolved"
            ).inc()
            metrics.session_duration_seconds.labels(
                method=str(self.context.method)
            ).observe(max(elapsed, 0) / 1000)

    def _release(self) -> None:
        if self.state is SessionState.CLOSED or self.slot is None:
            return
        self._logger.slots.release(self.slot)
        self.state = SessionState.CLOSED
        metrics.sessions_active.dec()
        logger.debug("session_closed", lane=self.slot)

    # ── rendering ──

    def _status(self) -> int | None:
        status = getattr(self.context, "status", None)
        if status is None:
            return None
        try:
            return int(status)
        except (TypeError, ValueError):
            return None

    def _render(
        self,
        kind: LineKind,
        message: str,
        now: float,
        *,
        first_meta: str | None = None,
        decorate: Decorator = identity,
    ) -> None:
        renderer = self._logger.renderer
        lanes = list(self._logger.slots)
        width = renderer.message_width(self._logger.resolve_width(), len(lanes))
        for fragment in wrap(message, width):
            if fragment.first and first_meta is not None:
                meta = first_meta
            else:
                meta = renderer.blank_meta()
            rail = renderer.rail(
                lanes,
                now,
                self.slot,
                renderer.marker(kind, fragment),
                self.start,
                self.context,
            )
            self._logger.report(renderer.compose(meta, rail, decorate(fragment.text)))
