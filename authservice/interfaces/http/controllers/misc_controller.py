# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from authservice.infrastructure.observability import render_metrics


class MiscController:
    def __init__(self, *, engine: Engine, metrics_enabled: bool = True) -> None:
        self._engine = engine
        self._metrics_enabled = metrics_enabled

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        if self._metrics_enabled:
            bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"status": "ok"}
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            status["status"] = "degraded"
            status["database"] = f"error: {type(exc).__name__}"
            return jsonify(status), 503
        return jsonify(status), 200

    def metrics(self) -> Response:
        body, content_type = render_metrics()
        return Response(body, mimetype=content_type)
