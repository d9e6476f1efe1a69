# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authservice.domain.users.credentials import validate_credentials
from authservice.domain.users.exceptions import InvalidCredentialsError, PhoneNotFoundError
from authservice.domain.users.repositories import (
    DownstreamProbe,
    PasswordHasher,
    TokenService,
    UserRepository,
)
from authservice.infrastructure.tracing import traced
from authservice.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        probe: DownstreamProbe | None = None,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._probe = probe

    @traced("auth.login")
    def execute(self, telephone: str, password: str) -> str:
        validate_credentials(telephone, password)

        user = self._users.find_by_phone(telephone)
        if user is None:
            logger.info("auth.login: unknown telephone")
            raise PhoneNotFoundError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: wrong password user_id={user.id}")
            raise InvalidCredentialsError()

        token = self._tokens.issue(user.id)
        logger.info(f"auth.login: ok user_id={user.id}")

        if self._probe is not None:
            self._probe.ping()
        return token
