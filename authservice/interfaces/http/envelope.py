# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Uniform `{code, data, message}` response body."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Response, jsonify


def respond(
    status: HTTPStatus, data: Any = None, message: str = ""
) -> tuple[Response, int]:
    return jsonify({"code": int(status), "data": data, "message": message}), int(status)


def success(data: Any = None, message: str = "ok") -> tuple[Response, int]:
    return respond(HTTPStatus.OK, data, message)


__all__ = ["respond", "success"]
