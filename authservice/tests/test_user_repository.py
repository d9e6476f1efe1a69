from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from authservice.domain.users.entities import User
from authservice.domain.users.exceptions import StorageError, UserAlreadyExistsError
from authservice.infrastructure.db import Base, build_session_factory, init_db
from authservice.infrastructure.db.models import User as UserRow
from authservice.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def repository(engine: Engine) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(build_session_factory(engine))


def _user(name: str = "alice", telephone: str = "13800000000") -> User:
    return User(
        id=0,
        name=name,
        telephone=telephone,
        password_hash="$2b$04$digest",
        created_at=datetime.now(UTC),
    )


def test_add_assigns_identifier(repository: SqlAlchemyUserRepository) -> None:
    first = repository.add(_user())
    second = repository.add(_user(name="bob", telephone="13900000000"))

    assert first.id > 0
    assert second.id != first.id
    assert first.password_hash == "$2b$04$digest"


def test_lookups(repository: SqlAlchemyUserRepository) -> None:
    stored = repository.add(_user())

    assert repository.find_by_phone("13800000000") == stored
    assert repository.find_by_name("alice") == stored
    assert repository.find_by_id(stored.id) == stored


def test_lookups_return_none_when_absent(repository: SqlAlchemyUserRepository) -> None:
    assert repository.find_by_phone("13800000000") is None
    assert repository.find_by_name("alice") is None
    assert repository.find_by_id(1) is None


def test_duplicate_name_surfaces_as_existing_user(
    repository: SqlAlchemyUserRepository, engine: Engine
) -> None:
    repository.add(_user())

    with pytest.raises(UserAlreadyExistsError):
        repository.add(_user(telephone="13900000000"))

    session = build_session_factory(engine)()
    try:
        assert session.query(UserRow).count() == 1
    finally:
        session.close()


def test_duplicate_telephone_surfaces_as_existing_user(
    repository: SqlAlchemyUserRepository,
) -> None:
    repository.add(_user())

    with pytest.raises(UserAlreadyExistsError):
        repository.add(_user(name="bob"))

    assert repository.find_by_name("bob") is None


def test_storage_failure_maps_to_storage_error(
    repository: SqlAlchemyUserRepository, engine: Engine
) -> None:
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageError) as exc_info:
        repository.find_by_phone("13800000000")

    assert exc_info.value.status == 500
