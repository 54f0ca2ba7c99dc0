"""
End-to-end tests for the HTTP API: cookie sessions, status codes and the
error envelope, driven through FastAPI's TestClient.
"""

import json
import uuid

import pytest

from app.config import settings


def signup(client, username="alice", password="pw1"):
    return client.post(
        "/api/auth/signup", json={"username": username, "password": password}
    )


def login(client, username="alice", password="pw1"):
    return client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )


def create_book(client, title="Ops", type_="profile") -> str:
    response = client.post("/api/books", json={"title": title, "type": type_})
    assert response.status_code == 200
    return response.json()["id"]


class TestAuthEndpoints:
    def test_signup_sets_session_cookie(self, client):
        response = signup(client)

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"
        assert client.cookies.get(settings.session_cookie_name)

        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "secure" in set_cookie
        assert "samesite=none" in set_cookie
        assert "max-age=86400" in set_cookie

    def test_me_returns_the_signed_in_user(self, client):
        user = signup(client).json()["user"]

        response = client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json() == {"user": user}

    def test_duplicate_signup_is_conflict(self, client):
        signup(client)

        response = signup(client, password="different")

        assert response.status_code == 409
        assert "error" in response.json()

    @pytest.mark.parametrize(
        "body",
        [{"username": "alice"}, {"password": "pw1"}, {"username": "", "password": ""}],
    )
    def test_signup_missing_fields_is_bad_request(self, client, body):
        response = client.post("/api/auth/signup", json=body)

        assert response.status_code == 400
        assert response.json()["error"]

    def test_login_with_bad_credentials_is_unauthorized(self, client):
        signup(client)
        client.cookies.clear()

        wrong_password = login(client, password="nope")
        unknown_user = login(client, username="mallory")

        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json()
        assert not client.cookies.get(settings.session_cookie_name)

    def test_login_issues_a_session_for_the_same_user(self, client):
        user_id = signup(client).json()["user"]["id"]
        client.cookies.clear()

        response = login(client)

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user_id
        assert client.get("/api/auth/me").json()["user"]["id"] == user_id

    def test_me_without_cookie_is_unauthorized(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["error"]

    def test_me_with_invalid_cookie_is_forbidden(self, client):
        client.cookies.set(settings.session_cookie_name, "not-a-token")

        response = client.get("/api/auth/me")

        assert response.status_code == 403

    def test_logout_clears_the_cookie(self, client):
        signup(client)

        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert client.get("/api/auth/me").status_code == 401

    def test_logout_without_session_still_succeeds(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200


class TestBookEndpoints:
    def test_books_require_a_session(self, client):
        assert client.get("/api/books").status_code == 401
        assert client.post("/api/books", json={"title": "Ops"}).status_code == 401

    def test_create_and_list_books(self, client):
        signup(client)
        first = create_book(client, "Ops")
        second = create_book(client, "Budget", "spreadsheet")

        response = client.get("/api/books")

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [second, first]

    def test_create_book_returns_id_title_and_type(self, client):
        signup(client)

        response = client.post("/api/books", json={"title": "Ops", "type": "profile"})

        body = response.json()
        assert set(body) == {"id", "title", "type"}
        assert uuid.UUID(body["id"])
        assert (body["title"], body["type"]) == ("Ops", "profile")

    @pytest.mark.parametrize(
        "body", [{"title": "Ops"}, {"type": "profile"}, {"title": "Ops", "type": "novel"}]
    )
    def test_create_book_rejects_bad_input(self, client, body):
        signup(client)

        response = client.post("/api/books", json=body)

        assert response.status_code == 400
        assert response.json()["error"]

    def test_spreadsheet_content_round_trips(self, client):
        signup(client)
        book_id = create_book(client, "Budget", "spreadsheet")
        grid = [["Item", "Cost"], ["Rent", "1200"]]

        response = client.put(
            f"/api/books/{book_id}", json={"title": "Budget 2025", "content": json.dumps(grid)}
        )
        assert response.json() == {"message": "Updated"}

        detail = client.get(f"/api/books/{book_id}").json()
        assert detail["title"] == "Budget 2025"
        assert json.loads(detail["content"]) == grid
        assert "entries" not in detail

    def test_non_rectangular_grid_is_rejected(self, client):
        signup(client)
        book_id = create_book(client, "Budget", "spreadsheet")

        response = client.put(f"/api/books/{book_id}", json={"content": [["a", "b"], ["c"]]})

        assert response.status_code == 400

    def test_other_users_book_is_not_found(self, client):
        signup(client, "bob", "pw2")
        signup(client)
        book_id = create_book(client)

        login(client, "bob", "pw2")

        assert client.get(f"/api/books/{book_id}").status_code == 404
        assert client.put(f"/api/books/{book_id}", json={"title": "x"}).status_code == 404
        assert client.delete(f"/api/books/{book_id}").status_code == 404
        assert client.get("/api/books").json() == []

    def test_malformed_book_id_is_not_found(self, client):
        signup(client)

        response = client.get("/api/books/definitely-not-a-uuid")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_delete_book_removes_it(self, client):
        signup(client)
        book_id = create_book(client)
        client.post("/api/entries", json={"book_id": book_id, "type": "trait", "content": "fast"})

        response = client.delete(f"/api/books/{book_id}")

        assert response.json() == {"message": "Deleted"}
        assert client.get(f"/api/books/{book_id}").status_code == 404
        assert client.get("/api/books").json() == []


class TestEntryEndpoints:
    def test_profile_entry_lifecycle(self, client):
        signup(client)
        book_id = create_book(client, "Ops", "profile")

        created = client.post(
            "/api/entries", json={"book_id": book_id, "type": "trait", "content": "fast"}
        )
        assert created.status_code == 200
        entry = created.json()
        assert (entry["book_id"], entry["type"], entry["content"]) == (book_id, "trait", "fast")

        detail = client.get(f"/api/books/{book_id}").json()
        assert [e["id"] for e in detail["entries"]] == [entry["id"]]

        deleted = client.delete(f"/api/entries/{entry['id']}")
        assert deleted.json() == {"message": "Deleted"}

        detail = client.get(f"/api/books/{book_id}").json()
        assert detail["entries"] == []

    def test_entry_on_someone_elses_book_is_forbidden(self, client):
        signup(client)
        book_id = create_book(client)
        signup(client, "bob", "pw2")

        response = client.post(
            "/api/entries", json={"book_id": book_id, "type": "secret", "content": "x"}
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden"}

    def test_entry_on_missing_book_is_forbidden(self, client):
        signup(client)

        response = client.post(
            "/api/entries",
            json={"book_id": str(uuid.uuid4()), "type": "trait", "content": "fast"},
        )

        assert response.status_code == 403

    def test_entry_with_unknown_type_is_bad_request(self, client):
        signup(client)
        book_id = create_book(client)

        response = client.post(
            "/api/entries", json={"book_id": book_id, "type": "rumour", "content": "x"}
        )

        assert response.status_code == 400

    def test_deleting_another_users_entry_is_not_found(self, client):
        signup(client)
        book_id = create_book(client)
        entry_id = client.post(
            "/api/entries", json={"book_id": book_id, "type": "trait", "content": "fast"}
        ).json()["id"]
        signup(client, "bob", "pw2")

        assert client.delete(f"/api/entries/{entry_id}").status_code == 404

        login(client)
        detail = client.get(f"/api/books/{book_id}").json()
        assert [e["id"] for e in detail["entries"]] == [entry_id]


class TestErrorsAndHealth:
    def test_wrongly_typed_body_is_bad_request(self, client):
        response = client.post("/api/auth/signup", json={"username": 1, "password": ["pw"]})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_malformed_json_is_bad_request(self, client):
        response = client.post(
            "/api/auth/signup",
            content="{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400

    def test_health_reports_ok(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}

    def test_health_reports_degraded_database(self, client, monkeypatch):
        async def unavailable():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(client.app.state.store, "check_connection", unavailable)

        response = client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
