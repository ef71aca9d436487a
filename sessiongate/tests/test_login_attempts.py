from __future__ import annotations

from sessiongate.infrastructure.auth.login_attempts import LoginAttemptsTracker


class FakeTime:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


def _tracker(clock: FakeTime) -> LoginAttemptsTracker:
    return LoginAttemptsTracker(max_attempts=3, lockout_duration=300, attempt_window=600, clock=clock)


def test_locks_after_max_failures() -> None:
    clock = FakeTime()
    tracker = _tracker(clock)

    for _ in range(2):
        tracker.record_attempt("alice", success=False, ip_address="1.2.3.4")
    assert not tracker.is_locked("alice")

    tracker.record_attempt("alice", success=False, ip_address="1.2.3.4")
    assert tracker.is_locked("alice")
    assert tracker.get_lockout_remaining("alice") == 300.0


def test_lockout_expires() -> None:
    clock = FakeTime()
    tracker = _tracker(clock)
    for _ in range(3):
        tracker.record_attempt("alice", success=False)

    clock.value += 300
    assert not tracker.is_locked("alice")
    assert tracker.get_failed_attempts_count("alice") == 0


def test_failures_outside_window_do_not_count() -> None:
    clock = FakeTime()
    tracker = _tracker(clock)
    tracker.record_attempt("alice", success=False)
    tracker.record_attempt("alice", success=False)

    clock.value += 601
    tracker.record_attempt("alice", success=False)

    assert not tracker.is_locked("alice")
    assert tracker.get_failed_attempts_count("alice") == 1


def test_success_resets_failures() -> None:
    clock = FakeTime()
    tracker = _tracker(clock)
    tracker.record_attempt("alice", success=False)
    tracker.record_attempt("alice", success=False)
    tracker.record_attempt("alice", success=True)
    tracker.record_attempt("alice", success=False)

    assert not tracker.is_locked("alice")
    assert tracker.get_failed_attempts_count("alice") == 1


def test_users_are_tracked_independently() -> None:
    clock = FakeTime()
    tracker = _tracker(clock)
    for _ in range(3):
        tracker.record_attempt("alice", success=False)

    assert tracker.is_locked("alice")
    assert not tracker.is_locked("bob")
