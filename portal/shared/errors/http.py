# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from portal.shared.logging import logger

from .base import AppError

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    if error.status == HTTPStatus.TOO_MANY_REQUESTS and error.context:
        response.headers["Retry-After"] = str(
            max(1, int(error.context.get("retry_after_seconds", 1)))
        )
    return response, error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.warning(
            f"Handled application error {exc.code} on {request.method} {request.path}"
        )
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        code = exc.name.lower().replace(" ", "_")
        response = jsonify({"message": exc.description, "error": code})
        return response, exc.code or default_status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {request.remote_addr or 'unknown'}, user={user_id}, "
                f"body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        message = getattr(g, "error_message", None) or GENERIC_ERROR_MESSAGE
        response = jsonify({"message": message, "error": "internal_error"})
        return response, default_status


__all__ = ["GENERIC_ERROR_MESSAGE", "handle_app_error", "register_error_handler"]
