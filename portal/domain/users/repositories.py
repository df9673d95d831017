# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from .entities import TokenClaims, UserAccount


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> UserAccount | None: ...
    def find_by_id(self, user_id: int) -> UserAccount | None: ...
    def add(self, account: UserAccount) -> UserAccount: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(
        self, user_id: int, username: str, expires_delta: timedelta | None = None
    ) -> str: ...
    def verify(self, token: str) -> TokenClaims: ...
