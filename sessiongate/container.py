"""Application dependency container."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from functools import cached_property

from sessiongate.application.services.password_hashing import WerkzeugPasswordHasher
from sessiongate.application.services.tokens import JwtTokenService, utc_now
from sessiongate.application.use_cases.users.access_protected_resource import (
    AccessProtectedResourceUseCase,
)
from sessiongate.application.use_cases.users.login_user import LoginUserUseCase
from sessiongate.application.use_cases.users.register_user import RegisterUserUseCase
from sessiongate.application.use_cases.users.verify_token import VerifyTokenUseCase
from sessiongate.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from sessiongate.infrastructure.auth.login_attempts import LoginAttemptsTracker
from sessiongate.infrastructure.db import Database
from sessiongate.infrastructure.repositories.users.in_memory_user_repository import (
    InMemoryUserRepository,
)
from sessiongate.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sessiongate.interfaces.http.controllers.auth_controller import AuthController
from sessiongate.interfaces.http.controllers.misc_controller import MiscController
from sessiongate.interfaces.http.controllers.protected_controller import ProtectedController
from sessiongate.shared.config import AppConfig
from sessiongate.shared.middleware.rate_limit import InMemoryRateLimiter


class Container:
    def __init__(
        self,
        config: AppConfig,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self._clock = clock

    @cached_property
    def database(self) -> Database | None:
        if self.config.user_store != "sqlalchemy":
            return None
        database = Database.from_config(self.config.database)
        database.init_schema()
        return database

    @cached_property
    def user_repository(self) -> UserRepository:
        if self.database is not None:
            return SqlAlchemyUserRepository(self.database)
        return InMemoryUserRepository()

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> TokenService:
        return JwtTokenService(
            secret_key=self.config.secret_key,
            ttl=timedelta(seconds=self.config.token.ttl_seconds),
            algorithm=self.config.token.algorithm,
            clock=self._clock,
        )

    @cached_property
    def login_attempts(self) -> LoginAttemptsTracker | None:
        security = self.config.security
        if not security.lockout_enabled:
            return None
        return LoginAttemptsTracker(
            max_attempts=security.max_login_attempts,
            lockout_duration=security.lockout_duration,
            attempt_window=security.login_attempt_window,
        )

    @cached_property
    def rate_limiter(self) -> InMemoryRateLimiter | None:
        security = self.config.security
        if not security.enable_rate_limit:
            return None
        return InMemoryRateLimiter(security.rate_limit_requests, security.rate_limit_window)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            clock=self._clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            attempts=self.login_attempts,
        )

    @cached_property
    def verify_token_use_case(self) -> VerifyTokenUseCase:
        return VerifyTokenUseCase(tokens=self.token_service)

    @cached_property
    def access_protected_resource_use_case(self) -> AccessProtectedResourceUseCase:
        return AccessProtectedResourceUseCase(verify=self.verify_token_use_case)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
        )

    @cached_property
    def protected_controller(self) -> ProtectedController:
        return ProtectedController(access_use_case=self.access_protected_resource_use_case)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(user_store=self.config.user_store, database=self.database)
