# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "usermgmt_request_latency_seconds",
    "Request latency",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
REQUEST_COUNTER = Counter(
    "usermgmt_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
AUTH_EVENTS = Counter(
    "usermgmt_auth_events_total",
    "Registration, login and logout outcomes",
    labelnames=("event", "outcome"),
)


def record_auth_event(event: str, *, success: bool) -> None:
    AUTH_EVENTS.labels(event=event, outcome="success" if success else "failure").inc()


def configure_metrics(app: Flask) -> None:
    @app.before_request
    def _start_timer() -> None:
        g.metrics_start = time.perf_counter()

    @app.after_request
    def _observe(response):
        start = getattr(g, "metrics_start", None)
        if start is not None:
            REQUEST_LATENCY.observe(time.perf_counter() - start)
        endpoint = request.endpoint or "unknown"
        REQUEST_COUNTER.labels(endpoint=endpoint, status=str(response.status_code)).inc()
        return response

    @app.get("/api/metrics")
    def metrics() -> Response:
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)


__all__ = [
    "AUTH_EVENTS",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "configure_metrics",
    "record_auth_event",
]
