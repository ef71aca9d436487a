# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import SessionToken, TokenClaims, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...

    def add(self, user: User) -> User:
        """Persist ``user``; raises ``UserAlreadyExistsError`` if the username is taken."""
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, username: str) -> SessionToken: ...
    def verify(self, token: str) -> TokenClaims: ...
