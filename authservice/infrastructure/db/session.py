# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from authservice.shared.config import DatabaseConfig
from authservice.shared.logging import logger


class Base(DeclarativeBase):
    pass


class StartupError(RuntimeError):
    """The service cannot run without its store; raised when bootstrapping fails."""


SessionFactory = Callable[[], Session]


def build_engine(config: DatabaseConfig) -> Engine:
    dsn = config.dsn()
    if dsn.startswith("sqlite"):
        return create_engine(
            dsn,
            echo=False,
            pool_pre_ping=True,
            connect_args={
                "check_same_thread": False,
                "timeout": int(config.pool_timeout),
            },
        )

    return create_engine(
        dsn,
        echo=False,
        pool_pre_ping=True,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    session = factory()
    logger.debug("db.session: opened session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed session")
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug("db.session: closed session")


def init_db(engine: Engine) -> None:
    # Importing the models registers their tables on Base.metadata.
    from . import models  # noqa: F401

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        logger.error(f"db: cannot reach storage at {engine.url!r}: {type(exc).__name__}")
        raise StartupError("failed to connect to the database") from exc
    logger.info("Database schema ensured")
