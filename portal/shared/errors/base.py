# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Shared error hierarchy for the service."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    """Base application exception carrying structured metadata."""

    message: str
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message, "error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Domain-level invariant violation.

    Subclasses declare ``message``, ``code`` and ``status`` as class attributes;
    the constructor only overrides what is passed explicitly.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        fallback_message = cast(str, getattr(self, "message", "domain_error"))
        resolved_message = message if message is not None else fallback_message
        resolved_code = cast(str, getattr(self, "code", "domain_error"))
        resolved_status = cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(
            message=resolved_message,
            code=resolved_code,
            status=resolved_status,
            context=context,
        )


class ValidationError(AppError):
    def __init__(
        self,
        message: str,
        code: str = "validation_error",
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            context={"field": field} if field else None,
        )

    @property
    def field(self) -> str | None:
        return self.context.get("field") if self.context else None


class RateLimitedError(AppError):
    def __init__(self, retry_after: float = 0) -> None:
        super().__init__(
            message="Too many requests, please try again later.",
            code="rate_limited",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retry_after_seconds": round(retry_after, 1)},
        )
