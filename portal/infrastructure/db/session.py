# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.shared.config import DatabaseConfig
from portal.shared.logging import logger, sanitize_message


class Base(DeclarativeBase):
    pass


def _create_engine(config: DatabaseConfig) -> Engine:
    url = make_url(config.url)
    if url.get_backend_name() == "sqlite":
        connect_args: dict[str, object] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            return create_engine(
                url, connect_args=connect_args, poolclass=StaticPool, future=True
            )
        return create_engine(
            url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            connect_args=connect_args,
        )

    return create_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
    )


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = _create_engine(config)
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )
        logger.info(f"db: engine created for {sanitize_message(config.url)}")

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
        logger.debug("db: engine disposed")


__all__ = ["Base", "Database"]
