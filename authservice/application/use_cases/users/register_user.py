# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from functools import partial

from authservice.domain.users.credentials import (
    GENERATED_NAME_LENGTH,
    validate_credentials,
    validate_name,
)
from authservice.domain.users.entities import User
from authservice.domain.users.exceptions import UserAlreadyExistsError
from authservice.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from authservice.infrastructure.tracing import traced
from authservice.shared.logging import logger
from authservice.utils.rand import rand_string


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        name_generator: Callable[[], str] = partial(rand_string, GENERATED_NAME_LENGTH),
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._name_generator = name_generator

    @traced("auth.register")
    def execute(self, name: str | None, telephone: str, password: str) -> tuple[User, str]:
        validate_credentials(telephone, password)

        # A generated name is not checked for collisions; a clash surfaces as a duplicate.
        name = name or self._name_generator()
        validate_name(name)

        if self._users.find_by_name(name):
            logger.info(f"auth.register: duplicate name={name}")
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(password)
        user = User(
            id=0,
            name=name,
            telephone=telephone,
            password_hash=hashed,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)

        # The user row is committed before signing; a signing failure leaves a
        # registered user who can still log in.
        token = self._tokens.issue(persisted.id)
        logger.info(f"auth.register: ok user_id={persisted.id} name={persisted.name}")
        return persisted, token
