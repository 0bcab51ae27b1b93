from datetime import timedelta

from app.core.sessions import SessionStore


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_create_and_resolve():
    store = SessionStore()
    token = store.create(7)
    assert store.resolve(token) == 7
    assert len(store) == 1


def test_tokens_are_unique_per_login():
    store = SessionStore()
    first = store.create(1)
    second = store.create(1)
    assert first != second
    assert store.resolve(first) == store.resolve(second) == 1


def test_unknown_token_is_not_found():
    assert SessionStore().resolve("nope") is None


def test_revoke_is_idempotent():
    store = SessionStore()
    token = store.create(3)
    store.revoke(token)
    store.revoke(token)
    assert store.resolve(token) is None
    assert len(store) == 0


def test_expired_session_does_not_resolve():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(minutes=5), clock=clock)
    token = store.create(1)

    clock.now += 299
    assert store.resolve(token) == 1

    clock.now += 2
    assert store.resolve(token) is None
    assert len(store) == 0


def test_create_sweeps_expired_sessions():
    clock = FakeClock()
    store = SessionStore(ttl=timedelta(seconds=10), clock=clock)
    store.create(1)
    store.create(2)

    clock.now += 11
    fresh = store.create(3)

    assert len(store) == 1
    assert store.resolve(fresh) == 3


def test_clear():
    store = SessionStore()
    store.create(1)
    store.clear()
    assert len(store) == 0
