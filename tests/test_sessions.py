import pytest

from studio.core.cache import InMemoryCacheBackend
from studio.core.sessions import SESSION_NAMESPACE, SessionExpired, SessionManager


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _manager(clock, backend=None):
    return SessionManager(backend or InMemoryCacheBackend(), idle_timeout_seconds=1800, clock=clock)


def _create(manager):
    return manager.create(staff_id=7, username="desk", name="Front Desk", role="staff", permissions=["reservations"])


def test_touch_moves_last_activity_forward():
    clock = _Clock()
    manager = _manager(clock)
    session = _create(manager)

    clock.now += 600
    touched = manager.touch(session.session_id)

    assert touched.last_activity == clock.now
    assert manager.expires_at(touched) == clock.now + 1800


def test_touch_at_exact_timeout_expires_session():
    clock = _Clock()
    manager = _manager(clock)
    session = _create(manager)

    clock.now += 1800
    with pytest.raises(SessionExpired):
        manager.touch(session.session_id)
    assert manager.load(session.session_id) is None


def test_touch_unknown_session_returns_none():
    assert _manager(_Clock()).touch("missing") is None


def test_unreadable_session_document_is_treated_as_absent():
    backend = InMemoryCacheBackend()
    backend.set(f"{SESSION_NAMESPACE}:broken", "{not json", 60)
    manager = _manager(_Clock(), backend)

    assert manager.load("broken") is None
    assert backend.get(f"{SESSION_NAMESPACE}:broken") is None


def test_clear_removes_session():
    manager = _manager(_Clock())
    session = _create(manager)
    manager.clear(session.session_id)
    assert manager.load(session.session_id) is None
