# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

PROTECTED_RESOURCE_MESSAGE = "This is a protected resource"


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class SessionToken:

    token: str
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class ProtectedResource:

    message: str
    user: str

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "user": self.user}
