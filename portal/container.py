# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application service context.

One :class:`Container` is built per application; it owns every stateful
collaborator (database engine, hashing pool, rate limiter) and releases them
in :meth:`Container.close`.
"""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from portal.application.services.password_hashing import (
    PooledPasswordHasher,
    WerkzeugPasswordHasher,
)
from portal.application.services.token_service import JwtTokenIssuer
from portal.application.use_cases.users.current_user import GetCurrentUserUseCase
from portal.application.use_cases.users.login_user import LoginUserUseCase
from portal.application.use_cases.users.register_user import RegisterUserUseCase
from portal.infrastructure.db import Database
from portal.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from portal.interfaces.http.controllers.auth_controller import AuthController
from portal.interfaces.http.controllers.misc_controller import MiscController
from portal.shared.config import AppConfig, load_config
from portal.shared.logging import logger
from portal.shared.middleware.rate_limit import InMemoryRateLimiter


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()
        self._closed = False

    @cached_property
    def database(self) -> Database:
        database = Database(self.config.database)
        database.create_schema()
        return database

    @cached_property
    def password_hasher(self) -> PooledPasswordHasher:
        return PooledPasswordHasher(
            WerkzeugPasswordHasher(method=self.config.security.password_hash_method),
            max_workers=self.config.security.hash_workers,
        )

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(
            secret_key=self.config.security.jwt_secret,
            ttl=timedelta(seconds=self.config.security.jwt_ttl_seconds),
        )

    @cached_property
    def rate_limiter(self) -> InMemoryRateLimiter:
        return InMemoryRateLimiter(
            self.config.security.rate_limit_requests,
            self.config.security.rate_limit_window,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository, tokens=self.token_issuer)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            current_user_use_case=self.current_user_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Only tear down what was actually built.
        if "password_hasher" in self.__dict__:
            self.password_hasher.shutdown()
        if "database" in self.__dict__:
            self.database.dispose()
        logger.info("container: closed")


__all__ = ["Container"]
