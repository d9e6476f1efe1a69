# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from authservice.domain.users.entities import User as DomainUser
from authservice.domain.users.exceptions import StorageError, UserAlreadyExistsError
from authservice.domain.users.repositories import UserRepository
from authservice.infrastructure.db.models import User
from authservice.infrastructure.db.session import SessionFactory, session_scope
from authservice.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        telephone=row.telephone,
        password_hash=row.password,
        created_at=row.created_at or datetime.now(UTC),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def find_by_phone(self, telephone: str) -> DomainUser | None:
        return self._find_one(User.telephone == telephone)

    def find_by_name(self, name: str) -> DomainUser | None:
        return self._find_one(User.name == name)

    def find_by_id(self, user_id: int) -> DomainUser | None:
        return self._find_one(User.id == user_id)

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope(self._session_factory) as session:
                row = User(
                    name=user.name,
                    telephone=user.telephone,
                    password=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration with the same name or telephone.
            logger.warning(f"users.add: uniqueness violation name={user.name}")
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.add: storage failure {type(exc).__name__}")
            raise StorageError() from exc

    def _find_one(self, criterion: ColumnElement[bool]) -> DomainUser | None:
        try:
            with session_scope(self._session_factory) as session:
                row = session.query(User).filter(criterion).first()
                if row is None:
                    return None
                return _to_domain(row)
        except SQLAlchemyError as exc:
            logger.error(f"users.lookup: storage failure {type(exc).__name__}")
            raise StorageError() from exc
