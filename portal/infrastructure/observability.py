# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

REQUEST_LATENCY = Histogram(
    "portal_request_latency_seconds",
    "Auth request latency",
    labelnames=("endpoint",),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
AUTH_EVENTS = Counter(
    "portal_auth_events_total",
    "Register and login outcomes",
    labelnames=("action", "outcome"),
)


@contextmanager
def track_latency(endpoint: str, status_getter: Callable[[], str]) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - start)
        AUTH_EVENTS.labels(action=endpoint, outcome=status_getter()).inc()


__all__ = ["AUTH_EVENTS", "REQUEST_LATENCY", "track_latency"]
