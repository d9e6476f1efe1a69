# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authservice.domain.users.entities import User, UserProfile
from authservice.domain.users.exceptions import AuthenticationRequiredError


class GetUserInfoUseCase:
    def execute(self, user: User | None) -> UserProfile:
        if user is None:
            raise AuthenticationRequiredError()
        return UserProfile.from_user(user)
