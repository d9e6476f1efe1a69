from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from authservice.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authservice.application.use_cases.users.get_user_info import GetUserInfoUseCase
from authservice.application.use_cases.users.login_user import LoginUserUseCase
from authservice.application.use_cases.users.register_user import RegisterUserUseCase
from authservice.auth import extract_bearer_token
from authservice.domain.users.entities import User
from authservice.domain.users.exceptions import (
    InvalidCredentialsError,
    PhoneNotFoundError,
    TokenExpiredError,
    TokenSigningError,
    UserAlreadyExistsError,
)
from authservice.interfaces.http.controllers.auth_controller import AuthController
from authservice.shared.errors import ValidationError
from authservice.shared.middleware.error_handler import configure_error_handling


def _user() -> User:
    return User(
        id=1,
        name="alice",
        telephone="13800000000",
        password_hash="hash",
        created_at=datetime.now(UTC),
    )


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _mount(
    app: Flask,
    *,
    register=None,
    login=None,
    authenticate=None,
) -> None:
    controller = AuthController(
        register_use_case=cast(RegisterUserUseCase, register or MagicMock()),
        login_use_case=cast(LoginUserUseCase, login or MagicMock()),
        info_use_case=GetUserInfoUseCase(),
        authenticate_use_case=cast(AuthenticateTokenUseCase, authenticate or MagicMock()),
    )
    app.register_blueprint(controller.as_blueprint())


def test_register_endpoint_returns_token(flask_app: Flask) -> None:
    register_called: dict[str, tuple[str | None, str, str]] = {}

    class StubRegister:
        def execute(self, name: str | None, telephone: str, password: str) -> tuple[User, str]:
            register_called["args"] = (name, telephone, password)
            return _user(), "token123"

    _mount(flask_app, register=StubRegister())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"name": "alice", "telephone": "13800000000", "password": "secret1"},
        )

    assert response.status_code == 200
    assert register_called["args"] == ("alice", "13800000000", "secret1")
    assert response.get_json() == {"code": 200, "data": {"token": "token123"}, "message": "registered"}


def test_register_name_is_optional(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.return_value = (_user(), "token123")
    _mount(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"telephone": "13800000000", "password": "secret1"}
        )

    assert response.status_code == 200
    register.execute.assert_called_once_with(None, "13800000000", "secret1")


def test_register_validation_error_envelope(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = ValidationError(
        "phone_invalid",
        message="telephone must be exactly 11 digits",
        context={"field": "telephone"},
    )
    _mount(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", json={"telephone": "1", "password": "secret1"})

    assert response.status_code == 422
    assert response.get_json() == {
        "code": 422,
        "data": {"error": "phone_invalid", "context": {"field": "telephone"}},
        "message": "telephone must be exactly 11 digits",
    }


def test_register_duplicate_returns_422(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = UserAlreadyExistsError()
    _mount(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"name": "alice", "telephone": "13800000000", "password": "secret1"},
        )

    assert response.status_code == 422
    assert response.get_json()["message"] == "user already exists"


def test_register_signing_failure_returns_500(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = TokenSigningError(context={"reason": "secret_missing"})
    _mount(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"telephone": "13800000000", "password": "secret1"}
        )

    assert response.status_code == 500
    payload = response.get_json()
    assert payload["data"]["error"] == "token_signing_failed"
    assert payload["message"] == "system error"


def test_register_unexpected_error_is_enveloped(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = RuntimeError("boom")
    _mount(flask_app, register=register)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"telephone": "13800000000", "password": "secret1"}
        )

    assert response.status_code == 500
    assert response.get_json() == {"code": 500, "data": None, "message": "internal error"}


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    login = MagicMock()
    _mount(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"telephone": 13800000000})

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["data"]["error"] == "validation_error"
    assert payload["data"]["context"]["fields"] == ["telephone"]
    login.execute.assert_not_called()


def test_login_returns_token(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = "token456"
    _mount(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"telephone": "13800000000", "password": "secret1"}
        )

    assert response.status_code == 200
    assert response.get_json()["data"] == {"token": "token456"}
    login.execute.assert_called_once_with("13800000000", "secret1")


@pytest.mark.parametrize(
    ("error", "status", "message"),
    [
        (InvalidCredentialsError(), 400, "wrong password"),
        (PhoneNotFoundError(), 422, "telephone does not exist"),
    ],
)
def test_login_failures(flask_app: Flask, error: Exception, status: int, message: str) -> None:
    login = MagicMock()
    login.execute.side_effect = error
    _mount(flask_app, login=login)

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"telephone": "13800000000", "password": "secret1"}
        )

    assert response.status_code == status
    payload = response.get_json()
    assert payload["code"] == status
    assert payload["message"] == message
    assert "token" not in (payload["data"] or {})


def test_info_requires_bearer_token(flask_app: Flask) -> None:
    authenticate = MagicMock()
    _mount(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        response = client.get("/api/auth/info")

    assert response.status_code == 401
    assert response.get_json()["data"]["error"] == "unauthorized"
    authenticate.execute.assert_not_called()


def test_info_rejects_expired_token(flask_app: Flask) -> None:
    authenticate = MagicMock()
    authenticate.execute.side_effect = TokenExpiredError()
    _mount(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        response = client.get("/api/auth/info", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.get_json()["data"]["error"] == "token_expired"
    authenticate.execute.assert_called_once_with("stale")


def test_info_returns_public_profile(flask_app: Flask) -> None:
    authenticate = MagicMock()
    authenticate.execute.return_value = _user()
    _mount(flask_app, authenticate=authenticate)

    with flask_app.test_client() as client:
        response = client.get("/api/auth/info", headers={"Authorization": "Bearer good"})

    assert response.status_code == 200
    assert response.get_json() == {
        "code": 200,
        "data": {"user": {"id": 1, "name": "alice", "telephone": "13800000000"}},
        "message": "ok",
    }


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("  Bearer   abc  ", "abc"),
        ("Basic abc", ""),
        ("Bearer", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_extract_bearer_token(header: str | None, expected: str) -> None:
    assert extract_bearer_token(header) == expected
