# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sessiongate.application.services.tokens import utc_now
from sessiongate.domain.users.entities import User
from sessiongate.domain.users.repositories import PasswordHasher, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, username: str, password: str) -> User:
        hashed = self._password_hasher.hash(password)
        user = User(id=0, username=username, password_hash=hashed, created_at=self._clock())
        # Uniqueness is enforced atomically by the repository.
        return self._users.add(user)
