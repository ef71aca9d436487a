# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessiongate.domain.users.entities import SessionToken
from sessiongate.domain.users.exceptions import AccountLockedError, InvalidCredentialsError
from sessiongate.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from sessiongate.infrastructure.auth.login_attempts import LoginAttemptsTracker
from sessiongate.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        attempts: LoginAttemptsTracker | None = None,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._attempts = attempts

    def execute(self, username: str, password: str, ip_address: str | None = None) -> SessionToken:
        if self._attempts is not None and self._attempts.is_locked(username):
            raise AccountLockedError(lockout_remaining=self._attempts.get_lockout_remaining(username))

        user = self._users.find_by_username(username)
        password_valid = user is not None and self._password_hasher.verify(password, user.password_hash)

        if not password_valid:
            if self._attempts is not None:
                self._attempts.record_attempt(username, success=False, ip_address=ip_address)
                logger.info(
                    f"login: failed attempt user={username} "
                    f"recent_failures={self._attempts.get_failed_attempts_count(username)}"
                )
            raise InvalidCredentialsError()

        if self._attempts is not None:
            self._attempts.record_attempt(username, success=True, ip_address=ip_address)

        return self._tokens.issue(user.username)
