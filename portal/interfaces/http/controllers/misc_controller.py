# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError

from portal.infrastructure.db import Database
from portal.shared.logging import logger


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            self._database.ping()
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed: {type(exc).__name__}")
            status["ok"] = False
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200

    def metrics(self) -> Response:
        return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)
