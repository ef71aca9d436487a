# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessiongate.domain.users.entities import TokenClaims
from sessiongate.domain.users.exceptions import MissingTokenError
from sessiongate.domain.users.repositories import TokenService


class VerifyTokenUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str | None) -> TokenClaims:
        if not token:
            raise MissingTokenError()
        return self._tokens.verify(token)
