# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Format rules for registration and login fields.

Every pattern is matched against the whole string with ASCII semantics, so
non-ASCII digits and a trailing newline are both rejected.
"""

from __future__ import annotations

import re

from portal.shared.errors.base import ValidationError

USERNAME_RE = re.compile(r"[A-Za-z0-9_]{3,15}", re.ASCII)
ID_NUMBER_RE = re.compile(r"\d{13}", re.ASCII)
ACCOUNT_NUMBER_RE = re.compile(r"\d{10,16}", re.ASCII)
PASSWORD_RE = re.compile(
    r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}", re.ASCII
)

MISSING_FIELDS_MESSAGE = "Please fill in all fields"
MISSING_LOGIN_FIELDS_MESSAGE = "Please provide both username and password"
USERNAME_MESSAGE = (
    "Invalid username format. Use 3-15 characters, letters, numbers, or underscores."
)
ID_NUMBER_MESSAGE = "ID Number must be 13 digits"
ACCOUNT_NUMBER_MESSAGE = "Account Number must be between 10 and 16 digits"
PASSWORD_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one uppercase "
    "letter, one lowercase letter, one number, and one special character."
)
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"


def _matches(pattern: re.Pattern[str], value: object) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_username(value: object) -> bool:
    return _matches(USERNAME_RE, value)


def is_valid_id_number(value: object) -> bool:
    return _matches(ID_NUMBER_RE, value)


def is_valid_account_number(value: object) -> bool:
    return _matches(ACCOUNT_NUMBER_RE, value)


def is_valid_password(value: object) -> bool:
    return _matches(PASSWORD_RE, value)


def validate_registration(
    username: str | None,
    password: str | None,
    id_number: str | None,
    account_number: str | None,
    confirm_password: str | None = None,
) -> None:
    """Raise :class:`ValidationError` for the first offending field.

    Fields are checked in a fixed order: presence of all four, username,
    ID number, account number, password, then ``confirm_password`` when given.
    """
    fields = {
        "username": username,
        "password": password,
        "idNumber": id_number,
        "accountNumber": account_number,
    }
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, code="missing_fields", field=missing[0])
    if not is_valid_username(username):
        raise ValidationError(USERNAME_MESSAGE, field="username")
    if not is_valid_id_number(id_number):
        raise ValidationError(ID_NUMBER_MESSAGE, field="idNumber")
    if not is_valid_account_number(account_number):
        raise ValidationError(ACCOUNT_NUMBER_MESSAGE, field="accountNumber")
    if not is_valid_password(password):
        raise ValidationError(PASSWORD_MESSAGE, field="password")
    if confirm_password is not None and confirm_password != password:
        raise ValidationError(PASSWORD_MISMATCH_MESSAGE, field="confirmPassword")


def validate_login(username: str | None, password: str | None) -> None:
    if not username:
        raise ValidationError(
            MISSING_LOGIN_FIELDS_MESSAGE, code="missing_fields", field="username"
        )
    if not password:
        raise ValidationError(
            MISSING_LOGIN_FIELDS_MESSAGE, code="missing_fields", field="password"
        )


__all__ = [
    "is_valid_account_number",
    "is_valid_id_number",
    "is_valid_password",
    "is_valid_username",
    "validate_login",
    "validate_registration",
]
