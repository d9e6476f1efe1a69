# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bounded bearer tokens (JWT, HMAC)."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import jwt

from authservice.domain.users.exceptions import (
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenMalformedError,
    TokenSigningError,
)
from authservice.domain.users.repositories import TokenService

_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class JwtTokenService(TokenService):
    def __init__(
        self,
        *,
        secret: str,
        ttl_seconds: int,
        issuer: str,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._issuer = issuer
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, user_id: int) -> str:
        if not self._secret:
            raise TokenSigningError(context={"reason": "secret_missing"})

        issued_at = int(self._clock())
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iss": self._issuer,
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise TokenSigningError(context={"reason": "encode_failed"}) from exc

    def verify(self, token: str) -> int:
        raw = (token or "").strip()
        if not raw:
            raise TokenMalformedError(context={"reason": "empty"})

        # Signature is checked before any claim; expiry uses the injected clock.
        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenInvalidSignatureError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformedError(context={"reason": type(exc).__name__}) from exc

        expires_at = payload.get("exp")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise TokenMalformedError(context={"reason": "exp_not_numeric"})
        if self._clock() >= expires_at:
            raise TokenExpiredError()

        subject = str(payload.get("sub") or "").strip()
        if not subject.isdigit():
            raise TokenMalformedError(context={"reason": "sub_not_numeric"})
        return int(subject)
