# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace
from threading import Lock

from sessiongate.domain.users.entities import User
from sessiongate.domain.users.exceptions import UserAlreadyExistsError
from sessiongate.domain.users.repositories import UserRepository


class InMemoryUserRepository(UserRepository):
    """Process-local credential store; contents are lost on restart."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1
        self._lock = Lock()

    def find_by_username(self, username: str) -> User | None:
        with self._lock:
            return self._users.get(username)

    def add(self, user: User) -> User:
        with self._lock:
            if user.username in self._users:
                raise UserAlreadyExistsError()
            persisted = replace(user, id=self._seq)
            self._seq += 1
            self._users[persisted.username] = persisted
            return persisted

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
