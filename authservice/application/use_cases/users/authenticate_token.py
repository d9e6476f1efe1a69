# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authservice.domain.users.entities import User
from authservice.domain.users.exceptions import TokenSubjectNotFoundError
from authservice.domain.users.repositories import TokenService, UserRepository
from authservice.infrastructure.tracing import traced


class AuthenticateTokenUseCase:
    """Resolve a bearer token into the user it was issued for."""

    def __init__(self, *, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    @traced("auth.authenticate")
    def execute(self, token: str) -> User:
        user_id = self._tokens.verify(token)
        user = self._users.find_by_id(user_id)
        if user is None:
            raise TokenSubjectNotFoundError(context={"user_id": user_id})
        return user
