# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain model for the authentication service."""

from .users.entities import User, UserProfile

__all__ = ["User", "UserProfile"]
