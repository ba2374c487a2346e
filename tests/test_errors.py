from fastapi.testclient import TestClient

from todoapp.client.auth import AuthClient
from todoapp.client.errors import BackendError
from todoapp.database import engine
from todoapp.main import app
from todoapp.models.todo import Todo


def _sign_up(client, email="kim@example.com", password="Pass123!"):
    r = client.post("/auth", data={"email": email, "password": password, "mode": "signup"}, follow_redirects=False)
    assert r.status_code == 303, r.text
    return client.cookies.get("access_token")


def _lose_todos_table():
    # the autouse fixture recreates it for the next test
    Todo.__table__.drop(bind=engine)


def test_unhandled_api_error_returns_json_500(client, signup):
    token, _ = signup()
    _lose_todos_table()

    crashing = TestClient(app, raise_server_exceptions=False)
    r = crashing.get("/todos/", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}


def test_backend_crash_renders_error_notification(client):
    _sign_up(client)
    client.post("/ui/todos", data={"title": "Buy milk"})
    _lose_todos_table()

    # the default client re-raises server exceptions, so a leaked crash fails here
    r = client.get("/")
    assert r.status_code == 200
    assert '<li class="toast toast-destructive"' in r.text
    assert "Internal server error" in r.text
    assert "No todos found" in r.text


def test_failed_session_check_keeps_the_cookie(client, monkeypatch):
    token = _sign_up(client)

    async def unavailable(self):
        raise BackendError("Internal server error", 503)

    monkeypatch.setattr(AuthClient, "get_session", unavailable)
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/auth"
    assert not any(c.startswith("access_token=") for c in r.headers.get_list("set-cookie"))
    assert client.cookies.get("access_token") == token

    r = client.get("/auth")
    assert r.status_code == 200
    assert "Internal server error" in r.text
    assert client.cookies.get("access_token") == token

    # once the backend answers again the same cookie still works
    monkeypatch.undo()
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 200


def test_rejected_token_still_clears_the_cookie(client):
    client.cookies.set("access_token", "not-a-token")
    r = client.get("/", follow_redirects=False)
    assert r.headers["location"] == "/auth"
    assert any(c.startswith("access_token=") for c in r.headers.get_list("set-cookie"))
