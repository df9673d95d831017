# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class UserAccount:

    id: int
    username: str
    password_hash: str
    id_number: str
    account_number: str
    created_at: datetime
    updated_at: datetime

    def summary(self) -> AccountSummary:
        return AccountSummary(id=self.id, username=self.username, created_at=self.created_at)


@dataclass(slots=True, frozen=True)
class AccountSummary:
    """Public view of an account; never carries the hash or the ID number."""

    id: int
    username: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class RegistrationResult:
    account: AccountSummary
    token: str


@dataclass(slots=True, frozen=True)
class LoginResult:
    token: str
