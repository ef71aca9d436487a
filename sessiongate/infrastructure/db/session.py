# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sessiongate.shared.config import DatabaseConfig
from sessiongate.shared.logging import logger


class Base(DeclarativeBase):
    pass


def create_db_engine(config: DatabaseConfig) -> Engine:
    connect_args: dict[str, object] = {}
    engine_kwargs: dict[str, object] = {}
    if config.url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout),
        }
        if ":memory:" in config.url or config.url == "sqlite://":
            # One shared connection, otherwise every session sees an empty database.
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_timeout"] = config.pool_timeout

    return create_engine(
        config.url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
        **engine_kwargs,
    )


class Database:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(
            bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "Database":
        return cls(create_db_engine(config))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._sessions()
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

    def init_schema(self) -> None:
        # Register ORM models on Base.metadata.
        from sessiongate.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
