"""
Prometheus metrics for raillog.

Session counters and latency histograms updated by every request
session. Exposition is left to the host application.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

sessions_active = Gauge(
    "raillog_sessions_active",
    "Sessions currently holding a lane",
)
lanes = Gauge(
    "raillog_lanes",
    "Size of the lane collection",
)
sessions_total = Counter(
    "raillog_sessions_total",
    "Sessions closed, by outcome",
    ["outcome"],
)
session_duration_seconds = Histogram(
    "raillog_session_duration_seconds",
    "Session duration in seconds",
    ["method"],
)
