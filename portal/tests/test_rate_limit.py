from __future__ import annotations

from flask import Flask

from portal.shared.errors import register_error_handler
from portal.shared.middleware.rate_limit import InMemoryRateLimiter, configure_rate_limit


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limit_within_window() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(3, 60.0, clock=clock)

    assert [limiter.allow("1.2.3.4") for _ in range(4)] == [True, True, True, False]
    assert limiter.allow("5.6.7.8")


def test_window_rolls_over() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(2, 60.0, clock=clock)
    limiter.hit("k")
    clock.now += 30
    limiter.hit("k")

    assert limiter.hit("k") == 30.0

    clock.now += 30
    assert limiter.allow("k")
    assert not limiter.allow("k")


def test_denied_requests_are_not_counted() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(1, 10.0, clock=clock)
    limiter.hit("k")
    for _ in range(5):
        clock.now += 1
        assert not limiter.allow("k")

    clock.now += 5
    assert limiter.allow("k")


def test_reset_clears_buckets() -> None:
    limiter = InMemoryRateLimiter(1, 60.0)
    limiter.hit("k")
    limiter.reset()

    assert limiter.allow("k")


def test_middleware_returns_429_with_retry_after() -> None:
    app = Flask(__name__)
    register_error_handler(app)
    configure_rate_limit(app, InMemoryRateLimiter(2, 60.0))

    @app.get("/ping")
    def ping():
        return {"ok": True}

    with app.test_client() as client:
        assert client.get("/ping").status_code == 200
        assert client.get("/ping").status_code == 200
        limited = client.get("/ping")
        other_client = client.get("/ping", environ_base={"REMOTE_ADDR": "10.0.0.9"})

    assert limited.status_code == 429
    assert limited.get_json()["error"] == "rate_limited"
    assert int(limited.headers["Retry-After"]) >= 1
    assert other_client.status_code == 200


def test_forwarded_header_does_not_reset_the_limit() -> None:
    app = Flask(__name__)
    register_error_handler(app)
    configure_rate_limit(app, InMemoryRateLimiter(3, 60.0))

    @app.get("/ping")
    def ping():
        return {"ok": True}

    with app.test_client() as client:
        statuses = [
            client.get("/ping", headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
            for i in range(10)
        ]

    assert statuses[:3] == [200, 200, 200]
    assert set(statuses[3:]) == {429}
