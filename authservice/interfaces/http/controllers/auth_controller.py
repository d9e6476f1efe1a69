# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, request
from pydantic import ValidationError

from authservice.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authservice.application.use_cases.users.get_user_info import GetUserInfoUseCase
from authservice.application.use_cases.users.login_user import LoginUserUseCase
from authservice.application.use_cases.users.register_user import RegisterUserUseCase
from authservice.auth import auth_required, current_user
from authservice.interfaces.http.dto.auth import (
    LoginRequestDTO,
    RegisterRequestDTO,
    TokenDTO,
    UserInfoDTO,
    UserProfileDTO,
)
from authservice.interfaces.http.envelope import success
from authservice.shared.errors.validation import raise_validation_error
from authservice.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        info_use_case: GetUserInfoUseCase,
        authenticate_use_case: AuthenticateTokenUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._info_use_case = info_use_case
        self._authenticate_use_case = authenticate_use_case

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, token = self._register_use_case.execute(dto.name, dto.telephone, dto.password)

        logger.info(f"auth.register: responded user_id={user.id}")
        return success(TokenDTO(token=token).model_dump(), "registered")

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = self._login_use_case.execute(dto.telephone, dto.password)

        return success(TokenDTO(token=token).model_dump(), "logged in")

    def info(self) -> tuple[Response, int]:
        profile = self._info_use_case.execute(current_user())
        payload = UserInfoDTO(user=UserProfileDTO.model_validate(profile))
        return success(payload.model_dump(), "ok")

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/info",
            endpoint="info",
            view_func=auth_required(self._authenticate_use_case)(self.info),
            methods=["GET"],
        )
        return bp
