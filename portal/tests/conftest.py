from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from portal.app import create_app
from portal.container import Container
from portal.shared.config import AppConfig, DatabaseConfig, SecurityConfig

# Cheap KDF so the suite does not spend its time in scrypt.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"
TEST_SECRET = "test-secret-key-0123456789abcdefghij"


@pytest.fixture()
def make_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., AppConfig]:
    monkeypatch.chdir(tmp_path)

    def factory(**security: Any) -> AppConfig:
        security_kwargs: dict[str, Any] = {
            "JWT_SECRET": TEST_SECRET,
            "PASSWORD_HASH_METHOD": FAST_HASH_METHOD,
            "HASH_WORKERS": 2,
        }
        security_kwargs.update(security)
        return AppConfig(
            database=DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'portal.db'}"),
            security=SecurityConfig(**security_kwargs),
        )

    return factory


@pytest.fixture()
def container(make_config: Callable[..., AppConfig]) -> Iterator[Container]:
    container = Container(make_config())
    yield container
    container.close()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container)


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as client:
        yield client
