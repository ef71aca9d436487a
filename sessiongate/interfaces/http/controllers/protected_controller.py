# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify

from sessiongate.application.use_cases.users.access_protected_resource import (
    AccessProtectedResourceUseCase,
)
from sessiongate.domain.users.exceptions import InvalidTokenError, MissingTokenError
from sessiongate.infrastructure.audit import AuditAction, audit_log
from sessiongate.interfaces.http.auth import extract_token
from sessiongate.shared.logging import logger
from sessiongate.shared.middleware.request_logger import get_client_ip


class ProtectedController:
    def __init__(self, *, access_use_case: AccessProtectedResourceUseCase) -> None:
        self._access_use_case = access_use_case

    def protected(self) -> tuple[Response, int]:
        try:
            resource = self._access_use_case.execute(extract_token())
        except MissingTokenError:
            logger.warning(f"auth.protected: no token from {get_client_ip()}")
            raise
        except InvalidTokenError as exc:
            audit_log(
                AuditAction.TOKEN_REJECTED,
                ip_address=get_client_ip(),
                details={"reason": exc.code},
                success=False,
            )
            raise

        g.username = resource.user
        logger.debug(f"auth.protected: ok user={resource.user}")
        return jsonify(resource.to_dict()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("protected", __name__)
        bp.add_url_rule("/protected", view_func=self.protected, methods=["GET"])
        return bp
