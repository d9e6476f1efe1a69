# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Input rules shared by registration and login."""

from __future__ import annotations

from authservice.shared.errors.base import ValidationError

TELEPHONE_LENGTH = 11
MIN_PASSWORD_LENGTH = 6
# bcrypt only consumes the first 72 bytes of a secret.
MAX_PASSWORD_BYTES = 72
MAX_NAME_LENGTH = 20
GENERATED_NAME_LENGTH = 10


def _utf8(value: str, *, field: str, code: str) -> bytes:
    # JSON may carry lone surrogates, which neither bcrypt nor the database accept.
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(
            code,
            message=f"{field} must be valid UTF-8 text",
            context={"field": field},
        ) from exc


def validate_credentials(telephone: str, password: str) -> None:
    if len(telephone) != TELEPHONE_LENGTH:
        raise ValidationError(
            "phone_invalid",
            message=f"telephone must be exactly {TELEPHONE_LENGTH} digits",
            context={"field": "telephone"},
        )
    _utf8(telephone, field="telephone", code="phone_invalid")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "password_too_short",
            message=f"password must be at least {MIN_PASSWORD_LENGTH} characters",
            context={"field": "password"},
        )
    if len(_utf8(password, field="password", code="password_invalid")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "password_too_long",
            message=f"password must be at most {MAX_PASSWORD_BYTES} bytes",
            context={"field": "password"},
        )


def validate_name(name: str) -> None:
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            "name_too_long",
            message=f"name must be at most {MAX_NAME_LENGTH} characters",
            context={"field": "name"},
        )
    _utf8(name, field="name", code="name_invalid")
