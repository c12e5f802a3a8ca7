"""
Starlette middleware drawing every HTTP request as a rail lane.

Wraps a ``RailLogger``: each request becomes one session whose handle
is available to route handlers as ``request.state.log``.
"""

from __future__ import annotations

from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from raillog.logger import RailLogger, create_logger
from raillog.session import RequestContext


def request_target(request: Request) -> str:
    """Path plus query string, as sent by the client."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class RailLoggerMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request on the terminal rail.

    Args:
        app: Downstream ASGI application.
        rail_logger: Logger to draw on; built with ``create_logger`` when omitted.
    """

    def __init__(self, app: Any, rail_logger: RailLogger | None = None) -> None:
        super().__init__(app)
        self.rail_logger = rail_logger if rail_logger is not None else create_logger()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        context = RequestContext(method=request.method, path=request_target(request))

        async def operation() -> Response:
            request.state.log = context.log
            response = await call_next(request)
            context.status = response.status_code
            return response

        response: Response = await self.rail_logger(context, operation)
        return response
