# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from sessiongate.domain.users.entities import User as DomainUser
from sessiongate.domain.users.exceptions import UserAlreadyExistsError
from sessiongate.domain.users.repositories import UserRepository
from sessiongate.infrastructure.db import Database
from sessiongate.infrastructure.db.models import UserRow


def _to_domain(row: UserRow) -> DomainUser:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite drops tz info on the way back.
        created_at = created_at.replace(tzinfo=UTC)
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def find_by_username(self, username: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            if not row:
                return None
            return _to_domain(row)

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = UserRow(
                    username=user.username,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc
