# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users import (
    AccountSummary,
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserAccount,
    UserNotFoundError,
)

__all__ = [
    "AccountSummary",
    "DuplicateUserError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserAccount",
    "UserNotFoundError",
]
