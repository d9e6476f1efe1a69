# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    telephone: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class UserProfile:
    """Public projection of a user; never carries the password digest."""

    id: int
    name: str
    telephone: str

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        return cls(id=user.id, name=user.name, telephone=user.telephone)
