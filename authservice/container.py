# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authservice.application.services.password_hashing import BcryptPasswordHasher
from authservice.application.services.tokens import JwtTokenService
from authservice.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from authservice.application.use_cases.users.get_user_info import GetUserInfoUseCase
from authservice.application.use_cases.users.login_user import LoginUserUseCase
from authservice.application.use_cases.users.register_user import RegisterUserUseCase
from authservice.infrastructure.db import build_engine, build_session_factory
from authservice.infrastructure.http_client import HttpDownstreamProbe, TracedHttpClient
from authservice.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from authservice.interfaces.http.controllers.auth_controller import AuthController
from authservice.interfaces.http.controllers.misc_controller import MiscController
from authservice.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None, *, engine: Engine | None = None) -> None:
        self._config = config or load_config()
        self._engine = engine

    @property
    def config(self) -> AppConfig:
        return self._config

    @cached_property
    def engine(self) -> Engine:
        return self._engine or build_engine(self._config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self._config.security.bcrypt_rounds)

    @cached_property
    def token_service(self) -> JwtTokenService:
        token = self._config.token
        return JwtTokenService(
            secret=token.secret,
            ttl_seconds=token.ttl_seconds,
            issuer=token.issuer,
            algorithm=token.algorithm,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def http_client(self) -> TracedHttpClient:
        return TracedHttpClient(timeout=self._config.observability.probe_timeout)

    @cached_property
    def downstream_probe(self) -> HttpDownstreamProbe | None:
        url = self._config.observability.probe_url
        if not url:
            return None
        return HttpDownstreamProbe(self.http_client, url)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            probe=self.downstream_probe,
        )

    @cached_property
    def get_user_info_use_case(self) -> GetUserInfoUseCase:
        return GetUserInfoUseCase()

    @cached_property
    def authenticate_token_use_case(self) -> AuthenticateTokenUseCase:
        return AuthenticateTokenUseCase(users=self.user_repository, tokens=self.token_service)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            info_use_case=self.get_user_info_use_case,
            authenticate_use_case=self.authenticate_token_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            engine=self.engine,
            metrics_enabled=self._config.observability.metrics_enabled,
        )
