# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AccountSummary, LoginResult, RegistrationResult, TokenClaims, UserAccount
from .exceptions import (
    DuplicateKeyError,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
)
from .repositories import PasswordHasher, TokenIssuer, UserRepository

__all__ = [
    "AccountSummary",
    "DuplicateKeyError",
    "DuplicateUserError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "LoginResult",
    "PasswordHasher",
    "RegistrationResult",
    "TokenClaims",
    "TokenIssuer",
    "UserAccount",
    "UserNotFoundError",
    "UserRepository",
]
