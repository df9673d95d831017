# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case resolving the account behind a bearer token."""

from __future__ import annotations

from portal.domain.users.entities import AccountSummary
from portal.domain.users.exceptions import InvalidTokenError
from portal.domain.users.repositories import TokenIssuer, UserRepository


class GetCurrentUserUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenIssuer) -> None:
        self._users = users
        self._tokens = tokens

    def execute(self, token: str) -> AccountSummary:
        claims = self._tokens.verify(token)
        user = self._users.find_by_id(claims.user_id)
        if user is None or user.username != claims.username:
            raise InvalidTokenError(context={"reason": "unknown_subject"})
        return user.summary()
