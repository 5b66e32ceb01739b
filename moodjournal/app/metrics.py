from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodjournal_requests_total",
    "Total HTTP requests processed by the mood journal",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodjournal_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodjournal_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

USER_API_COUNTER = Counter(
    "moodjournal_api_hits_total",
    "API hits per endpoint",
    ("endpoint",),
)

PIE_TAPS = Counter(
    "moodjournal_pie_taps_total",
    "Pie chart taps by resolution outcome",
    ("result",),
)

__all__ = [
    "PIE_TAPS",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "USER_API_COUNTER",
]
