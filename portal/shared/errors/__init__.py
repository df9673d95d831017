from .base import (
    AppError,
    DomainError,
    RateLimitedError,
    ValidationError,
)
from .http import GENERIC_ERROR_MESSAGE, handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "GENERIC_ERROR_MESSAGE",
    "RateLimitedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
