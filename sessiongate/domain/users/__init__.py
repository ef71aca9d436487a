# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import PROTECTED_RESOURCE_MESSAGE, ProtectedResource, SessionToken, TokenClaims, User
from .exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
)

__all__ = [
    "PROTECTED_RESOURCE_MESSAGE",
    "AccountLockedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "ProtectedResource",
    "SessionToken",
    "TokenClaims",
    "TokenExpiredError",
    "User",
    "UserAlreadyExistsError",
]
