# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from portal.shared.errors.base import DomainError


class DuplicateUserError(DomainError):
    message = "Username already taken"
    code = "duplicate_user"
    status = HTTPStatus.BAD_REQUEST


class InvalidCredentialsError(DomainError):
    message = "Invalid username or password"
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class UserNotFoundError(InvalidCredentialsError):
    """Raised for an unknown username.

    Shares message, code and status with :class:`InvalidCredentialsError` so
    responses cannot be used to probe which usernames exist.
    """


class InvalidTokenError(DomainError):
    message = "Invalid or expired token"
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class DuplicateKeyError(Exception):
    """Storage-level uniqueness violation on a user account column."""

    def __init__(self, field: str | None = None) -> None:
        super().__init__(f"duplicate key: {field or 'unknown'}")
        self.field = field
