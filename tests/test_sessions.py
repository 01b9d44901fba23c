import jwt

from sessions import SessionStore


def test_create_and_read():
    store = SessionStore(secret_key="k")

    token = store.create(42)

    assert store.read(token) == 42
    assert len(store) == 1


def test_expire_is_idempotent():
    store = SessionStore(secret_key="k")
    token = store.create(1)

    store.expire(token)
    store.expire(token)
    store.expire("not-a-token")
    store.expire(None)

    assert store.read(token) is None
    assert len(store) == 0


def test_rejects_foreign_and_malformed_tokens():
    store = SessionStore(secret_key="k")
    other = SessionStore(secret_key="other")

    assert store.read(other.create(1)) is None
    assert store.read("garbage") is None
    assert store.read("") is None


def test_expired_token_is_rejected_and_forgotten():
    store = SessionStore(secret_key="k", expire_minutes=-1)

    token = store.create(7)

    assert store.read(token) is None
    assert len(store) == 0


def test_tampered_subject_is_rejected():
    store = SessionStore(secret_key="k")
    token = store.create(1)
    payload = jwt.decode(token, "k", algorithms=["HS256"])
    payload["sub"] = "2"

    forged = jwt.encode(payload, "k", algorithm="HS256")

    assert store.read(forged) is None


def test_expired_sessions_are_purged_without_being_read():
    store = SessionStore(secret_key="k", expire_minutes=-1)

    for _ in range(1000):
        store.create(1)

    assert len(store) == 1

    store.expire_minutes = 5
    live = store.create(2)

    assert len(store) == 1
    assert store.read(live) == 2


def test_live_sessions_survive_purge():
    store = SessionStore(secret_key="k", expire_minutes=5)

    tokens = [store.create(n) for n in range(3)]

    assert len(store) == 3
    assert [store.read(t) for t in tokens] == [0, 1, 2]
