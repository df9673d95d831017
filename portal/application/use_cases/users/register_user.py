# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

from portal.domain.users.entities import RegistrationResult, UserAccount
from portal.domain.users.exceptions import DuplicateKeyError, DuplicateUserError
from portal.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from portal.domain.users.validators import validate_registration
from portal.shared.logging import logger

DUPLICATE_DETAILS_MESSAGE = "An account with these details already exists"


class RegisterUserUseCase:
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

    def execute(
        self,
        username: str | None,
        password: str | None,
        id_number: str | None,
        account_number: str | None,
        confirm_password: str | None = None,
    ) -> RegistrationResult:
        validate_registration(username, password, id_number, account_number, confirm_password)
        username, password = cast(str, username), cast(str, password)
        id_number, account_number = cast(str, id_number), cast(str, account_number)

        if self._users.find_by_username(username):
            logger.info(f"auth.register: username taken username={username}")
            raise DuplicateUserError()

        hashed = self._password_hasher.hash(password)
        now = datetime.now(UTC)
        account = UserAccount(
            id=0,
            username=username,
            password_hash=hashed,
            id_number=id_number,
            account_number=account_number,
            created_at=now,
            updated_at=now,
        )
        try:
            persisted = self._users.add(account)
        except DuplicateKeyError as exc:
            logger.info(f"auth.register: store rejected duplicate field={exc.field}")
            if exc.field == "username":
                raise DuplicateUserError() from exc
            raise DuplicateUserError(DUPLICATE_DETAILS_MESSAGE) from exc

        # Issued from committed data only.
        token = self._tokens.issue(persisted.id, persisted.username)
        return RegistrationResult(account=persisted.summary(), token=token)
