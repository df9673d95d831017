# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from threading import Lock

from flask import Flask, Request, request

from portal.infrastructure.audit import AuditAction, audit_log
from portal.shared.errors.base import RateLimitedError

_SWEEP_EVERY = 1024


class InMemoryRateLimiter:
    """Rolling-window request counter keyed by client.

    A key may make ``limit`` requests within any ``window_seconds`` span;
    denied requests are not counted.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._buckets: dict[str, deque[float]] = {}
        self._lock = Lock()
        self._calls = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window(self) -> float:
        return self._window

    def hit(self, key: str) -> float:
        """Record a request for ``key``.

        Returns 0 when the request is allowed, otherwise the seconds until the
        oldest counted request leaves the window.
        """
        with self._lock:
            now = self._clock()
            self._calls += 1
            if self._calls % _SWEEP_EVERY == 0:
                self._sweep(now)

            bucket = self._buckets.setdefault(key, deque())
            while bucket and (now - bucket[0]) >= self._window:
                bucket.popleft()
            if len(bucket) >= self._limit:
                return max(self._window - (now - bucket[0]), 0.001)
            bucket.append(now)
            return 0.0

    def allow(self, key: str) -> bool:
        return self.hit(key) == 0.0

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()

    def _sweep(self, now: float) -> None:
        stale = [
            key
            for key, bucket in self._buckets.items()
            if not bucket or (now - bucket[-1]) >= self._window
        ]
        for key in stale:
            del self._buckets[key]


def client_key(req: Request) -> str:
    # Forwarded headers are honoured only through ProxyFix (TRUSTED_PROXY_HOPS).
    return req.remote_addr or "unknown"


def configure_rate_limit(app: Flask, limiter: InMemoryRateLimiter) -> None:
    @app.before_request
    def _enforce_rate_limit() -> None:
        if request.method == "OPTIONS":
            return
        key = client_key(request)
        retry_after = limiter.hit(key)
        if retry_after:
            audit_log(
                AuditAction.RATE_LIMITED,
                ip_address=key,
                details={"path": request.path},
                success=False,
            )
            raise RateLimitedError(retry_after)


__all__ = ["InMemoryRateLimiter", "client_key", "configure_rate_limit"]
