# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import string

_LETTERS = string.ascii_letters


def rand_string(length: int) -> str:
    """Random ASCII-letter string, used for default display names."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return "".join(secrets.choice(_LETTERS) for _ in range(length))


__all__ = ["rand_string"]
