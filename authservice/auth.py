# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from authservice.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authservice.domain.users.entities import User
from authservice.domain.users.exceptions import AuthenticationRequiredError, TokenError
from authservice.shared.logging import logger

_BEARER_PREFIX = "bearer "


def extract_bearer_token(header: str | None) -> str:
    raw = (header or "").strip()
    if raw[: len(_BEARER_PREFIX)].lower() != _BEARER_PREFIX:
        return ""
    return raw[len(_BEARER_PREFIX):].strip()


def current_user() -> User | None:
    return getattr(g, "current_user", None)


def auth_required(
    authenticate: AuthenticateTokenUseCase,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Verify the bearer token and attach the resolved user to `flask.g`."""

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(f)
        def inner(*a, **kw):
            token = extract_bearer_token(request.headers.get("Authorization"))
            if not token:
                logger.warning(
                    f"No bearer token on {request.method} {request.path} "
                    f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
                )
                raise AuthenticationRequiredError()

            try:
                user = authenticate.execute(token)
            except TokenError as exc:
                logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
                raise

            g.current_user = user
            g.user_id = user.id
            logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
            return f(*a, **kw)

        return inner

    return decorator
