# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

INVALID_BODY_MESSAGE = "Request body contains fields of the wrong type"


def first_error_field(exc: PydanticValidationError) -> str | None:
    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)
        if field_path:
            return field_path
    return None


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(INVALID_BODY_MESSAGE, field=first_error_field(exc)) from exc


__all__ = [
    "INVALID_BODY_MESSAGE",
    "first_error_field",
    "raise_validation_error",
]
