# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import cast

from portal.domain.users.entities import LoginResult
from portal.domain.users.exceptions import InvalidCredentialsError, UserNotFoundError
from portal.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from portal.domain.users.validators import validate_login


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        # Unknown usernames are verified against this hash.
        self._dummy_hash = password_hasher.hash("timing-equaliser-Aa1!")

    def execute(self, username: str | None, password: str | None) -> LoginResult:
        validate_login(username, password)
        username, password = cast(str, username), cast(str, password)

        user = self._users.find_by_username(username)
        if user is None:
            self._password_hasher.verify(password, self._dummy_hash)
            raise UserNotFoundError()

        if not self._password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        return LoginResult(token=self._tokens.issue(user.id, user.username))
