"""
管理后台会话接口与会话存储
"""
from orderhub.services.session_store import InMemorySessionStore, new_session_key


def test_in_memory_store():
    store = InMemorySessionStore()
    key = new_session_key()
    assert store.get(key) is None
    store.set(key, {"access_token": "abc"})
    assert store.get(key) == {"access_token": "abc"}
    store.clear(key)
    assert store.get(key) is None
    store.clear(key)


def test_session_lifecycle(client):
    assert client.get("/api/auth/session").status_code == 401

    payload = {"access_token": "token-1", "user": {"email": "admin@example.cl"}}
    created = client.post("/api/auth/session", json=payload)
    assert created.status_code == 200
    assert "admin_session" in created.cookies

    current = client.get("/api/auth/session")
    assert current.status_code == 200
    assert current.json() == {"success": True, "session": payload}

    cleared = client.delete("/api/auth/session")
    assert cleared.json() == {"success": True}
    assert client.get("/api/auth/session").status_code == 401


def test_sessions_are_isolated_per_cookie(client):
    client.post("/api/auth/session", json={"access_token": "token-a"})
    client.cookies.clear()
    assert client.get("/api/auth/session").status_code == 401


def test_root_and_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "running"
