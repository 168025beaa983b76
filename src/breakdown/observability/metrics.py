from __future__ import annotations

"""Prometheus metrics for the breakdown API.

Adds an HTTP middleware that records request latency per method/path/status
and a counter of breakdown outcomes.
"""

import time
from typing import Callable, Awaitable

from prometheus_client import Counter, Histogram
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

# Model calls dominate latency, so buckets reach well past typical web timings
REQUEST_LATENCY = Histogram(
    "breakdown_request_latency_seconds",
    "HTTP request latency in seconds",
    labelnames=("method", "path", "status"),
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

BREAKDOWN_OUTCOMES = Counter(
    "breakdown_outcomes_total",
    "Breakdown requests by outcome",
    labelnames=("outcome",),
)


def record_outcome(outcome: str) -> None:
    BREAKDOWN_OUTCOMES.labels(outcome=outcome).inc()


def route_label(request: Request) -> str:
    """Label by the matched route template; unmatched paths share one label."""
    route = request.scope.get("route")
    if route is None:
        for candidate in request.app.router.routes:
            match, _ = candidate.matches(request.scope)
            if match == Match.FULL:
                route = candidate
                break
    template = getattr(route, "path_format", None) or getattr(route, "path", None)
    return template or "unmatched"


def metrics_middleware_factory() -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    async def middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)
        started = time.perf_counter()
        response = await call_next(request)
        REQUEST_LATENCY.labels(
            method=request.method,
            path=route_label(request),
            status=str(response.status_code),
        ).observe(time.perf_counter() - started)
        return response

    return middleware
