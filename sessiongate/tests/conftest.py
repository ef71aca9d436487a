from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from sessiongate.app import create_app
from sessiongate.container import Container
from sessiongate.shared.config import AppConfig, DatabaseConfig, SecurityConfig, TokenConfig

TEST_SECRET = "test-secret-key-with-enough-entropy-0123456789"
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


class MutableClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_config(**overrides) -> AppConfig:
    values = {
        "APP_ENV": "test",
        "SECRET_KEY": TEST_SECRET,
        "USER_STORE": "memory",
        "LOG_FILE": None,
        "database": DatabaseConfig(DATABASE_URL="sqlite://"),
        "token": TokenConfig(JWT_ALGORITHM="HS256", TOKEN_TTL_SECONDS=3600),
        "security": SecurityConfig(
            ALLOWED_ORIGINS="*",
            ENABLE_RATE_LIMIT=False,
            LOGIN_LOCKOUT_ENABLED=False,
        ),
    }
    values.update(overrides)
    return AppConfig(**values)


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture()
def config() -> AppConfig:
    return make_config()


@pytest.fixture()
def container(config: AppConfig, clock: MutableClock) -> Container:
    return Container(config, clock=clock)


@pytest.fixture()
def client(container: Container):
    app = create_app(container=container)
    app.config.update(TESTING=True)
    with app.test_client() as test_client:
        yield test_client
