# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from authservice.domain.users.exceptions import PasswordHashingError
from authservice.domain.users.repositories import PasswordHasher

DEFAULT_ROUNDS = 10


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt with a random salt per call and a fixed work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        try:
            digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds))
        except (TypeError, ValueError) as exc:
            raise PasswordHashingError() from exc
        return digest.decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (TypeError, ValueError):
            return False
