"""
raillog: concurrent request timeline logger.

Draws every in-flight asynchronous request as a lane of an ASCII rail
diagram, colored by elapsed time and outcome, with per-request log
messages wrapped into the owning lane.
"""

from raillog.config import Settings, get_settings
from raillog.exceptions import LaneError, RailLoggerError
from raillog.logger import RailLogger, create_logger
from raillog.middleware import RailLoggerMiddleware
from raillog.session import LogHandle, RequestContext, RequestSession, SessionState
from raillog.slots import SlotAllocator

__all__ = [
    "LaneError",
    "LogHandle",
    "RailLogger",
    "RailLoggerError",
    "RailLoggerMiddleware",
    "RequestContext",
    "RequestSession",
    "SessionState",
    "Settings",
    "SlotAllocator",
    "create_logger",
    "get_settings",
]
