import logging
import uuid

import todoapp.config


def test_register_and_login_success(client):
    email = f"test_{uuid.uuid4().hex}@example.com"
    password = "correct_horse_battery_staple"

    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 200
    data = r.json()
    assert data["email"] == email
    assert "id" in data

    r2 = client.post("/auth/login", json={"email": email, "password": password})
    assert r2.status_code == 200
    data2 = r2.json()
    assert data2["token"]
    assert data2["token_type"] == "bearer"
    assert data2["user"] == {"id": data["id"], "email": email}


def test_register_duplicate_email(client):
    email = f"test_{uuid.uuid4().hex}@example.com"
    assert client.post("/auth/register", json={"email": email, "password": "pw1"}).status_code == 200
    r = client.post("/auth/register", json={"email": email, "password": "other"})
    assert r.status_code == 400
    assert "exists" in r.json()["detail"].lower()


def test_register_rejects_bad_input(client):
    assert client.post("/auth/register", json={"password": "pw"}).status_code == 422
    assert client.post("/auth/register", json={"email": "not_an_email", "password": "pw"}).status_code == 422
    assert client.post("/auth/register", json={"email": "a@example.com", "password": ""}).status_code == 422


def test_register_password_too_long(client):
    email = f"test_{uuid.uuid4().hex}@example.com"
    r = client.post("/auth/register", json={"email": email, "password": "a" * 100})
    assert r.status_code in (422, 400)
    text = r.text.lower()
    assert "password" in text and ("too long" in text or "72" in text)


def test_login_wrong_password(client, signup):
    signup(email="carol@example.com", password="right-one")
    r = client.post("/auth/login", json={"email": "carol@example.com", "password": "wrong-one"})
    assert r.status_code == 401
    r = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever"})
    assert r.status_code == 401


def test_rejected_login_does_not_log_the_email(client, signup, caplog):
    signup(email="dave@example.com", password="right-one")
    with caplog.at_level(logging.DEBUG, logger="todoapp"):
        r = client.post("/auth/login", json={"email": "dave@example.com", "password": "wrong-one"})
    assert r.status_code == 401
    assert "login rejected" in caplog.text
    assert "dave@example.com" not in caplog.text


def test_session_and_logout(client, signup):
    token, user = signup()
    headers = {"Authorization": f"Bearer {token}"}

    r = client.get("/auth/session", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == user["id"]

    # query parameter works as well as the header
    assert client.get(f"/auth/session?token={token}").status_code == 200

    r = client.post("/auth/logout", headers=headers)
    assert r.status_code == 200

    r = client.get("/auth/session", headers=headers)
    assert r.status_code == 401
    assert "revoked" in r.json()["detail"].lower()
    assert client.get("/todos/", headers=headers).status_code == 401


def test_missing_and_invalid_token(client):
    r = client.get("/auth/session")
    assert r.status_code == 401
    assert r.json()["detail"] == "Missing token"

    r = client.get("/todos/", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"


def test_expired_token(client, signup, monkeypatch):
    monkeypatch.setattr(todoapp.config, "ACCESS_TOKEN_EXPIRE_MINUTES", -1)
    token, _ = signup()
    r = client.get("/todos/", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert "expired" in r.json()["detail"].lower()
