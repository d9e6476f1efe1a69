from __future__ import annotations

import json

import jwt
import pytest
from jwt.utils import base64url_decode, base64url_encode

from authservice.application.services.tokens import JwtTokenService
from authservice.domain.users.exceptions import (
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenMalformedError,
    TokenSigningError,
)

SECRET = "a-test-signing-secret-of-sufficient-length"
OTHER_SECRET = "another-signing-secret-of-sufficient-length"
ISSUER = "authservice"
ISSUED_AT = 1_700_000_000
TTL = 60


def _service(*, secret: str = SECRET, now: float = ISSUED_AT) -> JwtTokenService:
    return JwtTokenService(secret=secret, ttl_seconds=TTL, issuer=ISSUER, clock=lambda: now)


def _swap_signature(token: str, donor: str) -> str:
    head, payload, _ = token.split(".")
    return ".".join([head, payload, donor.split(".")[2]])


def _rewrite_payload(token: str, **claims) -> str:
    head, payload, signature = token.split(".")
    decoded = json.loads(base64url_decode(payload.encode()))
    decoded.update(claims)
    new_payload = base64url_encode(json.dumps(decoded).encode()).decode()
    return ".".join([head, new_payload, signature])


def test_issued_token_verifies_to_subject() -> None:
    token = _service().issue(42)

    assert _service(now=ISSUED_AT + TTL - 1).verify(token) == 42


def test_issued_token_carries_expected_claims() -> None:
    token = _service().issue(7)

    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["sub"] == "7"
    assert claims["iss"] == ISSUER
    assert claims["iat"] == ISSUED_AT
    assert claims["exp"] == ISSUED_AT + TTL


def test_token_expires_after_ttl() -> None:
    token = _service().issue(42)

    with pytest.raises(TokenExpiredError) as exc_info:
        _service(now=ISSUED_AT + TTL).verify(token)

    assert exc_info.value.status == 401
    assert exc_info.value.code == "token_expired"


def test_altered_signature_rejected_before_expiry() -> None:
    token = _service().issue(42)
    forged = _swap_signature(token, _service(secret=OTHER_SECRET).issue(42))

    with pytest.raises(TokenInvalidSignatureError):
        _service().verify(forged)


def test_altered_signature_rejected_after_expiry() -> None:
    token = _service().issue(42)
    forged = _swap_signature(token, _service(secret=OTHER_SECRET).issue(42))

    with pytest.raises(TokenInvalidSignatureError):
        _service(now=ISSUED_AT + 10 * TTL).verify(forged)


def test_extended_expiry_without_resigning_is_rejected() -> None:
    token = _service().issue(42)
    forged = _rewrite_payload(token, exp=ISSUED_AT + 100 * TTL)

    with pytest.raises(TokenInvalidSignatureError):
        _service(now=ISSUED_AT + 2 * TTL).verify(forged)


def test_validly_signed_past_expiry_is_rejected() -> None:
    token = jwt.encode(
        {"sub": "42", "iss": ISSUER, "iat": ISSUED_AT - 2 * TTL, "exp": ISSUED_AT - TTL},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenExpiredError):
        _service().verify(token)


def test_token_from_other_secret_is_rejected() -> None:
    token = _service(secret=OTHER_SECRET).issue(42)

    with pytest.raises(TokenInvalidSignatureError):
        _service().verify(token)


@pytest.mark.parametrize("token", ["", "   ", "not-a-token", "a.b.c"])
def test_unparseable_token_is_malformed(token: str) -> None:
    with pytest.raises(TokenMalformedError):
        _service().verify(token)


def test_missing_expiry_claim_is_malformed() -> None:
    token = jwt.encode({"sub": "42", "iss": ISSUER, "iat": ISSUED_AT}, SECRET, algorithm="HS256")

    with pytest.raises(TokenMalformedError):
        _service().verify(token)


def test_wrong_issuer_is_malformed() -> None:
    token = jwt.encode(
        {"sub": "42", "iss": "someone-else", "iat": ISSUED_AT, "exp": ISSUED_AT + TTL},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenMalformedError):
        _service().verify(token)


def test_non_numeric_subject_is_malformed() -> None:
    token = jwt.encode(
        {"sub": "alice", "iss": ISSUER, "iat": ISSUED_AT, "exp": ISSUED_AT + TTL},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenMalformedError) as exc_info:
        _service().verify(token)

    assert exc_info.value.context == {"reason": "sub_not_numeric"}


def test_missing_secret_fails_signing() -> None:
    with pytest.raises(TokenSigningError) as exc_info:
        _service(secret="").issue(42)

    assert exc_info.value.status == 500
    assert exc_info.value.code == "token_signing_failed"
