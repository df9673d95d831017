# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from portal.application.use_cases.users.current_user import GetCurrentUserUseCase
from portal.application.use_cases.users.login_user import LoginUserUseCase
from portal.application.use_cases.users.register_user import RegisterUserUseCase
from portal.domain.users.exceptions import InvalidTokenError
from portal.infrastructure.audit import AuditAction, audit_log
from portal.infrastructure.observability import track_latency
from portal.interfaces.http.dto.auth import (
    AccountSummaryDTO,
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
)
from portal.shared.errors.base import AppError
from portal.shared.errors.validation import raise_validation_error
from portal.shared.logging import logger
from portal.shared.middleware.rate_limit import client_key


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError(context={"reason": "missing"})
    return token.strip()


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._current_user_use_case = current_user_use_case

    def register(self) -> tuple[Response, int]:
        g.error_message = "Error registering user"
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_key(request)
        outcome = "error"
        with track_latency("register", lambda: outcome):
            try:
                result = self._register_use_case.execute(
                    dto.username,
                    dto.password,
                    dto.id_number,
                    dto.account_number,
                    dto.confirm_password,
                )
            except AppError as exc:
                outcome = exc.code
                audit_log(
                    AuditAction.REGISTER_FAILED,
                    ip_address=ip_address,
                    details={"username": dto.username, "error": exc.code},
                    success=False,
                )
                raise
            outcome = "success"

        audit_log(
            AuditAction.REGISTER,
            user_id=result.account.id,
            ip_address=ip_address,
            details={"username": result.account.username},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={result.account.id}")
        payload = AuthSuccessDTO(message="User registered successfully!", token=result.token)
        return jsonify(payload.model_dump()), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        g.error_message = "Error logging in"
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_key(request)
        outcome = "error"
        with track_latency("login", lambda: outcome):
            try:
                result = self._login_use_case.execute(dto.username, dto.password)
            except AppError as exc:
                outcome = exc.code
                audit_log(
                    AuditAction.LOGIN_FAILED,
                    ip_address=ip_address,
                    details={"username": dto.username, "error": type(exc).__name__},
                    success=False,
                )
                raise
            outcome = "success"

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            ip_address=ip_address,
            details={"username": dto.username},
            success=True,
        )
        logger.info(f"auth.login: ok username={dto.username}")
        payload = AuthSuccessDTO(message="Login successful!", token=result.token)
        return jsonify(payload.model_dump()), HTTPStatus.OK

    def me(self) -> tuple[Response, int]:
        summary = self._current_user_use_case.execute(_bearer_token())
        g.user_id = summary.id
        payload = AccountSummaryDTO(
            id=summary.id, username=summary.username, created_at=summary.created_at
        )
        return jsonify(payload.model_dump(mode="json", by_alias=True)), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/user")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
