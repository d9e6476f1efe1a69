# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Response, jsonify
from werkzeug.exceptions import HTTPException

from authservice.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, int]:
    response = jsonify(error.to_dict())
    return response, int(error.status)


def _handle_http(exc: HTTPException) -> tuple[Response, int]:
    status = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
    payload = {
        "code": status,
        "data": {"error": (exc.name or "http_error").lower().replace(" ", "_")},
        "message": exc.description or exc.name,
    }
    return jsonify(payload), status


def register_error_handler(
    app,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        from flask import request

        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.opt(exception=exc.__cause__ or exc).error(
                f"Application error {exc.code} on {request.method} {request.path}"
            )
        else:
            logger.warning(f"Handled application error {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        return _handle_http(exc)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        from flask import g, request

        ip_address = request.headers.get("X-Forwarded-For", "").split(",")[0].strip() if request.headers.get("X-Forwarded-For") else (request.remote_addr or "unknown")
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.opt(exception=exc).error(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Error: {type(exc).__name__} on {request.method} {request.path}"
            )

        response = jsonify({"code": int(default_status), "data": None, "message": "internal error"})
        return response, int(default_status)
