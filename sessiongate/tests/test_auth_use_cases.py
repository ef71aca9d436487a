from __future__ import annotations

from datetime import timedelta

import pytest

from sessiongate.application.services.tokens import JwtTokenService
from sessiongate.application.use_cases.users.access_protected_resource import (
    AccessProtectedResourceUseCase,
)
from sessiongate.application.use_cases.users.login_user import LoginUserUseCase
from sessiongate.application.use_cases.users.register_user import RegisterUserUseCase
from sessiongate.application.use_cases.users.verify_token import VerifyTokenUseCase
from sessiongate.domain.users.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
)
from sessiongate.domain.users.repositories import PasswordHasher
from sessiongate.infrastructure.auth.login_attempts import LoginAttemptsTracker
from sessiongate.infrastructure.repositories.users.in_memory_user_repository import (
    InMemoryUserRepository,
)

from conftest import TEST_SECRET, MutableClock


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class Gate:
    def __init__(self, clock: MutableClock, attempts: LoginAttemptsTracker | None = None) -> None:
        self.users = InMemoryUserRepository()
        hasher = DeterministicHasher()
        self.tokens = JwtTokenService(secret_key=TEST_SECRET, ttl=timedelta(hours=1), clock=clock)
        self.register = RegisterUserUseCase(users=self.users, password_hasher=hasher, clock=clock)
        self.login = LoginUserUseCase(
            users=self.users, tokens=self.tokens, password_hasher=hasher, attempts=attempts
        )
        self.verify = VerifyTokenUseCase(tokens=self.tokens)
        self.access = AccessProtectedResourceUseCase(verify=self.verify)


@pytest.fixture()
def gate(clock: MutableClock) -> Gate:
    return Gate(clock)


def test_register_user_stores_hash_not_plaintext(gate: Gate) -> None:
    user = gate.register.execute("alice", "secret123")

    assert user.id == 1
    assert user.username == "alice"
    stored = gate.users.find_by_username("alice")
    assert stored is not None
    assert stored.password_hash == "hashed:secret123"


def test_register_user_duplicate_raises(gate: Gate) -> None:
    gate.register.execute("alice", "secret123")

    with pytest.raises(UserAlreadyExistsError):
        gate.register.execute("alice", "other")
    assert len(gate.users) == 1


def test_usernames_are_case_sensitive(gate: Gate) -> None:
    gate.register.execute("alice", "secret123")
    gate.register.execute("Alice", "different")

    with pytest.raises(InvalidCredentialsError):
        gate.login.execute("ALICE", "secret123")
    assert gate.login.execute("Alice", "different").username == "Alice"


@pytest.mark.parametrize(
    ("username", "password"),
    [("alice", "secret123"), ("bob", "p"), ("carol ", " spaced pass "), ("dávid", "ünïcode")],
)
def test_login_token_verifies_for_registered_users(
    gate: Gate, username: str, password: str
) -> None:
    gate.register.execute(username, password)

    session_token = gate.login.execute(username, password)
    claims = gate.verify.execute(session_token.token)

    assert claims.username == username
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)


def test_login_wrong_password_raises(gate: Gate) -> None:
    gate.register.execute("alice", "secret123")

    with pytest.raises(InvalidCredentialsError):
        gate.login.execute("alice", "wrong")


def test_login_unknown_user_raises(gate: Gate) -> None:
    with pytest.raises(InvalidCredentialsError):
        gate.login.execute("nobody", "secret123")


def test_verify_missing_token(gate: Gate) -> None:
    with pytest.raises(MissingTokenError):
        gate.verify.execute(None)
    with pytest.raises(MissingTokenError):
        gate.verify.execute("")


def test_access_protected_resource_returns_username(gate: Gate) -> None:
    gate.register.execute("alice", "secret123")
    token = gate.login.execute("alice", "secret123").token

    resource = gate.access.execute(token)

    assert resource.to_dict() == {"message": "This is a protected resource", "user": "alice"}


def test_access_protected_resource_errors(gate: Gate) -> None:
    with pytest.raises(MissingTokenError):
        gate.access.execute(None)
    with pytest.raises(InvalidTokenError):
        gate.access.execute("not-a-token")


def test_access_after_expiry_requires_new_login(gate: Gate, clock: MutableClock) -> None:
    gate.register.execute("alice", "secret123")
    token = gate.login.execute("alice", "secret123").token

    clock.advance(hours=1)
    with pytest.raises(TokenExpiredError):
        gate.access.execute(token)

    fresh = gate.login.execute("alice", "secret123").token
    assert gate.access.execute(fresh).user == "alice"


def test_login_lockout_after_repeated_failures(clock: MutableClock) -> None:
    seconds = [0.0]
    tracker = LoginAttemptsTracker(
        max_attempts=3, lockout_duration=60, attempt_window=600, clock=lambda: seconds[0]
    )
    gate = Gate(clock, attempts=tracker)
    gate.register.execute("alice", "secret123")

    for _ in range(3):
        with pytest.raises(InvalidCredentialsError):
            gate.login.execute("alice", "wrong", "10.0.0.1")

    with pytest.raises(AccountLockedError) as excinfo:
        gate.login.execute("alice", "secret123")
    assert excinfo.value.context == {"lockout_remaining_seconds": 60.0}

    seconds[0] = 61.0
    assert gate.login.execute("alice", "secret123").username == "alice"
