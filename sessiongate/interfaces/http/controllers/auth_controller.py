# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from sessiongate.application.use_cases.users.login_user import LoginUserUseCase
from sessiongate.application.use_cases.users.register_user import RegisterUserUseCase
from sessiongate.domain.users.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from sessiongate.infrastructure.audit import AuditAction, audit_log
from sessiongate.interfaces.http.dto.auth import LoginRequestDTO, RegisterRequestDTO, TokenResponseDTO
from sessiongate.shared.errors.validation import raise_validation_error
from sessiongate.shared.logging import logger
from sessiongate.shared.middleware.rate_limit import rate_limit
from sessiongate.shared.middleware.request_logger import get_client_ip

REGISTERED_MESSAGE = "User registered"


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case

    @rate_limit
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            self._register_use_case.execute(dto.username, dto.password)
        except UserAlreadyExistsError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                username=dto.username,
                ip_address=get_client_ip(),
                details={"reason": "user_already_exists"},
                success=False,
            )
            raise

        audit_log(AuditAction.REGISTER, username=dto.username, ip_address=get_client_ip())
        logger.info(f"auth.register: ok username={dto.username}")
        return Response(REGISTERED_MESSAGE, mimetype="text/plain"), 201

    @rate_limit
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = get_client_ip()

        try:
            session_token = self._login_use_case.execute(dto.username, dto.password, ip_address)
        except AccountLockedError as exc:
            audit_log(
                AuditAction.LOGIN_LOCKED,
                username=dto.username,
                ip_address=ip_address,
                details=dict(exc.context or {}),
                success=False,
            )
            raise
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                username=dto.username,
                ip_address=ip_address,
                success=False,
            )
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, username=dto.username, ip_address=ip_address)
        logger.info(
            f"auth.login: ok username={dto.username} exp={session_token.expires_at.isoformat()}"
        )
        return jsonify(TokenResponseDTO(token=session_token.token).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        return bp
