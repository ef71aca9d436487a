from __future__ import annotations

import threading
from datetime import UTC, datetime

import pytest

from sessiongate.domain.users.entities import User
from sessiongate.domain.users.exceptions import UserAlreadyExistsError
from sessiongate.infrastructure.db import Database
from sessiongate.infrastructure.db import session as db_session
from sessiongate.infrastructure.repositories.users.in_memory_user_repository import (
    InMemoryUserRepository,
)
from sessiongate.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sessiongate.shared.config import DatabaseConfig


def _user(username: str, password_hash: str = "hash") -> User:
    return User(
        id=0,
        username=username,
        password_hash=password_hash,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture(params=["memory", "sqlalchemy"])
def repository(request, tmp_path):
    if request.param == "memory":
        yield InMemoryUserRepository()
        return
    database = Database.from_config(DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'users.db'}"))
    database.init_schema()
    yield SqlAlchemyUserRepository(database)
    database.dispose()


def test_add_assigns_ids_and_find_returns_record(repository) -> None:
    alice = repository.add(_user("alice", "h1"))
    bob = repository.add(_user("bob", "h2"))

    assert alice.id != bob.id
    found = repository.find_by_username("alice")
    assert found is not None
    assert found.password_hash == "h1"
    assert found.created_at == datetime(2026, 1, 1, tzinfo=UTC)


def test_find_unknown_returns_none(repository) -> None:
    assert repository.find_by_username("ghost") is None


def test_duplicate_username_rejected(repository) -> None:
    repository.add(_user("alice", "h1"))

    with pytest.raises(UserAlreadyExistsError):
        repository.add(_user("alice", "h2"))

    found = repository.find_by_username("alice")
    assert found is not None
    assert found.password_hash == "h1"


def test_lookup_is_case_sensitive(repository) -> None:
    repository.add(_user("alice"))

    assert repository.find_by_username("Alice") is None
    repository.add(_user("Alice"))
    assert repository.find_by_username("Alice") is not None


def test_concurrent_registration_of_same_username_keeps_one_record() -> None:
    repository = InMemoryUserRepository()
    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def worker(n: int) -> None:
        barrier.wait()
        try:
            repository.add(_user("alice", f"h{n}"))
            result = "ok"
        except UserAlreadyExistsError:
            result = "dup"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == 7
    assert len(repository) == 1


def test_sqlalchemy_store_survives_new_repository_instance(tmp_path) -> None:
    config = DatabaseConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'persist.db'}")
    first = Database.from_config(config)
    first.init_schema()
    SqlAlchemyUserRepository(first).add(_user("alice", "h1"))
    first.dispose()

    second = Database.from_config(config)
    second.init_schema()
    found = SqlAlchemyUserRepository(second).find_by_username("alice")
    second.dispose()

    assert found is not None
    assert found.password_hash == "h1"


@pytest.mark.parametrize(
    ("url", "expected_kwargs", "expected_connect_args"),
    [
        (
            "postgresql://gate@db/gate",
            {"pool_timeout": 12.5},
            {},
        ),
        (
            "sqlite:///gate.db",
            {},
            {"check_same_thread": False, "timeout": 12},
        ),
    ],
)
def test_pool_timeout_reaches_engine(
    monkeypatch, url: str, expected_kwargs: dict, expected_connect_args: dict
) -> None:
    captured: dict = {}

    def fake_create_engine(engine_url, **kwargs):
        captured["url"] = engine_url
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(db_session, "create_engine", fake_create_engine)

    db_session.create_db_engine(DatabaseConfig(DATABASE_URL=url, DATABASE_POOL_TIMEOUT=12.5))

    assert captured["url"] == url
    assert captured["connect_args"] == expected_connect_args
    assert captured.get("pool_timeout") == expected_kwargs.get("pool_timeout")
