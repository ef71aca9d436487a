# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from sessiongate.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT
    message = "User already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class AccountLockedError(DomainError):
    code = "account_locked"
    status = HTTPStatus.TOO_MANY_REQUESTS
    message = "Too many failed login attempts"

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(context={"lockout_remaining_seconds": round(lockout_remaining, 1)})


class MissingTokenError(DomainError):
    code = "missing_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "No token provided"


class InvalidTokenError(DomainError):
    """Token is malformed, carries a bad signature, or is no longer valid."""

    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED
    message = "Failed to authenticate token"


class TokenExpiredError(InvalidTokenError):
    code = "token_expired"
