# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessiongate.application.use_cases.users.verify_token import VerifyTokenUseCase
from sessiongate.domain.users.entities import PROTECTED_RESOURCE_MESSAGE, ProtectedResource


class AccessProtectedResourceUseCase:
    def __init__(self, *, verify: VerifyTokenUseCase) -> None:
        self._verify = verify

    def execute(self, token: str | None) -> ProtectedResource:
        claims = self._verify.execute(token)
        return ProtectedResource(message=PROTECTED_RESOURCE_MESSAGE, user=claims.username)
