import pytest


def _sign_up(client, email="hana@example.com", password="Pass123!"):
    r = client.post("/auth", data={"email": email, "password": password, "mode": "signup"}, follow_redirects=False)
    assert r.status_code == 303, r.text
    assert r.headers["location"] == "/"
    return client.cookies.get("access_token")


def _todo_ids(client, token):
    rows = client.get("/todos/", headers={"Authorization": f"Bearer {token}"}).json()
    return {row["title"]: row["id"] for row in rows}


@pytest.fixture
def browser(client):
    token = _sign_up(client)
    client.post("/ui/todos", data={"title": "Buy milk", "priority": "low", "category": "shopping"})
    client.post("/ui/todos", data={"title": "Write report", "priority": "high", "category": "work", "due_date": "2024-03-05"})
    ids = _todo_ids(client, token)
    client.post(f"/ui/todos/{ids['Write report']}/toggle", data={"completed": "true"})
    return client, token, ids


def test_list_without_session_redirects_to_auth(client):
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/auth"

    r = client.get("/auth")
    assert r.status_code == 200
    assert "Sign in to manage your tasks" in r.text


def test_bad_credentials_stay_on_auth_page(client):
    r = client.post("/auth", data={"email": "nobody@example.com", "password": "nope"})
    assert r.status_code == 400
    assert "Invalid credentials" in r.text


def test_first_visit_shows_empty_state(client):
    _sign_up(client)
    r = client.get("/")
    assert r.status_code == 200
    assert "No todos found" in r.text
    assert "Create your first todo to get started!" in r.text
    assert "Add Your First Todo" in r.text
    # already signed in: the auth page bounces back to the list
    assert client.get("/auth", follow_redirects=False).headers["location"] == "/"


def test_create_shows_confirmation_once(client):
    _sign_up(client)
    r = client.post("/ui/todos", data={"title": "Buy milk", "priority": "low", "category": "shopping"})
    assert r.status_code == 200
    assert "Todo created successfully!" in r.text
    assert "Buy milk" in r.text
    assert 'data-badge="priority">low' in r.text
    assert "Todo created successfully!" not in client.get("/").text


def test_rows_render_badges_and_completion(browser):
    client, _, _ = browser
    html = client.get("/").text
    assert 'data-tone="destructive"' in html
    assert 'data-tone="success"' in html
    assert "Mar 05, 2024" in html
    assert "line-through" in html


def test_filters_narrow_the_list(browser):
    client, _, _ = browser
    html = client.get("/?q=milk").text
    assert "Buy milk" in html and "Write report" not in html

    html = client.get("/?status=completed").text
    assert "Write report" in html and "Buy milk" not in html

    html = client.get("/?priority=high").text
    assert "Write report" in html and "Buy milk" not in html

    html = client.get("/?category=health").text
    assert "Try adjusting your filters" in html
    assert "Add Your First Todo" not in html


def test_edit_dialog_and_update(browser):
    client, token, ids = browser
    html = client.get(f"/?edit={ids['Buy milk']}").text
    assert "Edit Todo" in html
    assert f"/ui/todos/{ids['Buy milk']}/edit" in html

    r = client.post(f"/ui/todos/{ids['Buy milk']}/edit", data={"title": "Buy oat milk", "priority": "medium", "category": "shopping"})
    assert "Todo updated successfully!" in r.text
    assert "Buy oat milk" in _todo_ids(client, token)


def test_new_dialog(browser):
    client, _, _ = browser
    assert "Create New Todo" in client.get("/?new=1").text


def test_invalid_draft_is_reported(browser):
    client, token, ids = browser
    r = client.post("/ui/todos", data={"title": "   "})
    assert "title cannot be empty" in r.text
    assert len(_todo_ids(client, token)) == len(ids)


def test_delete_and_unknown_delete(browser):
    client, token, ids = browser
    r = client.post(f"/ui/todos/{ids['Buy milk']}/delete")
    assert "Todo deleted successfully!" in r.text
    assert "Buy milk" not in _todo_ids(client, token)

    r = client.post("/ui/todos/not-a-real-id/delete")
    assert "Todo not found" in r.text
    assert "Write report" in r.text


def test_sign_out_revokes_session(browser):
    client, token, _ = browser
    r = client.post("/ui/signout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/auth"
    assert client.cookies.get("access_token") is None
    assert client.get("/", follow_redirects=False).headers["location"] == "/auth"
    assert client.get("/auth/session", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_redirect_target_stays_on_site(browser):
    client, _, ids = browser
    r = client.post(f"/ui/todos/{ids['Buy milk']}/toggle", data={"completed": "true", "next": "https://evil.example"}, follow_redirects=False)
    assert r.headers["location"] == "/"
    r = client.post(f"/ui/todos/{ids['Buy milk']}/toggle", data={"completed": "false", "next": "/?status=active"}, follow_redirects=False)
    assert r.headers["location"] == "/?status=active"
