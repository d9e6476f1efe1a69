# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authservice.shared.errors.base import DomainError, InfrastructureError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.UNPROCESSABLE_ENTITY
    message = "user already exists"


class PhoneNotFoundError(DomainError):
    code = "phone_not_found"
    status = HTTPStatus.UNPROCESSABLE_ENTITY
    message = "telephone does not exist"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST
    message = "wrong password"


class TokenError(DomainError):
    code = "token_invalid"
    status = HTTPStatus.UNAUTHORIZED
    message = "invalid token"


class TokenInvalidSignatureError(TokenError):
    code = "token_invalid_signature"
    message = "token signature is invalid"


class TokenExpiredError(TokenError):
    code = "token_expired"
    message = "token has expired"


class TokenMalformedError(TokenError):
    code = "token_malformed"
    message = "token is malformed"


class TokenSubjectNotFoundError(TokenError):
    code = "token_subject_unknown"
    message = "token subject does not exist"


class AuthenticationRequiredError(TokenError):
    code = "unauthorized"
    message = "authorization required"


class TokenSigningError(InfrastructureError):
    def __init__(self, *, context=None) -> None:
        super().__init__("token_signing_failed", context=context)


class PasswordHashingError(InfrastructureError):
    def __init__(self, *, context=None) -> None:
        super().__init__("password_hashing_failed", context=context)


class StorageError(InfrastructureError):
    def __init__(self, *, context=None) -> None:
        super().__init__("storage_error", context=context)
