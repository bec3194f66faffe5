"""
NoteShare Backend: API Integration Tests
=========================================

What:  End-to-end HTTP behaviour through the full middleware stack, against
       a real SQLite database (see conftest.test_client).

What we test:
    ✅ register → login → create note → another user gets 404
    ✅ 400 / 401 / 404 / 409 status codes and the error body shape
    ✅ password and password hash never appear in any response
    ✅ owner fields in request bodies are ignored
    ✅ public endpoints need no token and only see public notes
    ✅ /api/me, /health, X-Request-ID, X-Total-Count
"""

import pytest

REGISTER = "/api/register"
LOGIN = "/api/login"
NOTES = "/api/notes"


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_success(self, test_client):
        response = await test_client.post(
            REGISTER,
            json={"username": "alice", "email": "a@x.com", "password": "secret1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "a@x.com"
        assert isinstance(body["user"]["id"], int)
        assert "secret1" not in response.text
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_duplicate_username_conflict(self, test_client):
        payload = {"username": "alice", "email": "a@x.com", "password": "secret1"}
        await test_client.post(REGISTER, json=payload)

        response = await test_client.post(REGISTER, json={**payload, "email": "b@x.com"})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Username already taken"
        assert body["code"] == "conflict"

    @pytest.mark.asyncio
    async def test_validation_error_body(self, test_client):
        response = await test_client.post(
            REGISTER,
            json={"username": "ab", "email": "bad", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Username must be at least 3 characters"
        assert body["code"] == "validation_error"
        assert "request_id" in body

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username, email, field",
        [
            ("u" * 151, "a@x.com", "username"),
            ("alice", "a@" + "x" * 300 + ".com", "email"),
        ],
    )
    async def test_overlong_identity_fields_are_400(self, test_client, username, email, field):
        response = await test_client.post(
            REGISTER,
            json={"username": username, "email": email, "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": field}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "alice", "email": "a@x.com"},
            {"username": 5, "email": "a@x.com", "password": "secret1"},
            [],
        ],
    )
    async def test_malformed_body_is_400(self, test_client, payload):
        response = await test_client.post(REGISTER, json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"

    @pytest.mark.asyncio
    async def test_non_json_body_is_400(self, test_client):
        response = await test_client.post(
            REGISTER,
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_token_and_user(self, test_client):
        await test_client.post(
            REGISTER,
            json={"username": "alice", "email": "a@x.com", "password": "secret1"},
        )

        response = await test_client.post(LOGIN, json={"login": "a@x.com", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["token"].count(".") == 2
        assert body["user"]["username"] == "alice"
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_bad_credentials_are_indistinguishable(self, test_client):
        await test_client.post(
            REGISTER,
            json={"username": "alice", "email": "a@x.com", "password": "secret1"},
        )

        unknown = await test_client.post(LOGIN, json={"login": "nobody", "password": "secret1"})
        wrong = await test_client.post(LOGIN, json={"login": "alice", "password": "nope123"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json()["error"] == wrong.json()["error"] == "Invalid login or password"

    @pytest.mark.asyncio
    async def test_empty_login_is_400(self, test_client):
        response = await test_client.post(LOGIN, json={"login": "", "password": ""})
        assert response.status_code == 400


class TestAccessGuard:

    @pytest.mark.asyncio
    async def test_missing_header(self, test_client):
        response = await test_client.get(NOTES)

        assert response.status_code == 401
        assert response.json()["error"] == "Missing authorization header"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header", ["Bearer not-a-token", "Basic abc", "Bearer"]
    )
    async def test_invalid_header(self, test_client, header):
        response = await test_client.get(NOTES, headers={"Authorization": header})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token"

    @pytest.mark.asyncio
    async def test_me(self, test_client, login_as):
        headers, user = await login_as("alice")

        response = await test_client.get("/api/me", headers=headers)

        assert response.status_code == 200
        assert response.json() == user

    @pytest.mark.asyncio
    async def test_me_requires_token(self, test_client):
        response = await test_client.get("/api/me")
        assert response.status_code == 401


class TestNotesScenario:

    @pytest.mark.asyncio
    async def test_owner_isolation(self, test_client, login_as):
        alice_headers, alice = await login_as("alice")
        bob_headers, _ = await login_as("bob")

        created = await test_client.post(
            NOTES, json={"title": "T", "content": "C"}, headers=alice_headers
        )
        assert created.status_code == 201
        note = created.json()
        assert note["owner_id"] == alice["id"]
        assert note["is_public"] is False
        url = f"{NOTES}/{note['id']}"

        assert (await test_client.get(url, headers=bob_headers)).status_code == 404
        put = await test_client.put(url, json={"title": "pwned"}, headers=bob_headers)
        assert put.status_code == 404
        assert (await test_client.delete(url, headers=bob_headers)).status_code == 404

        bob_list = await test_client.get(NOTES, headers=bob_headers)
        assert bob_list.json() == []

        still_there = await test_client.get(url, headers=alice_headers)
        assert still_there.status_code == 200
        assert still_there.json()["title"] == "T"

    @pytest.mark.asyncio
    async def test_owner_in_body_is_ignored(self, test_client, login_as):
        alice_headers, _ = await login_as("alice")
        _, bob = await login_as("bob")

        response = await test_client.post(
            NOTES,
            json={"title": "mine", "owner_id": bob["id"], "user_id": bob["id"]},
            headers=alice_headers,
        )

        assert response.status_code == 201
        assert response.json()["owner_id"] != bob["id"]

    @pytest.mark.asyncio
    async def test_crud_round(self, test_client, login_as):
        headers, _ = await login_as("alice")

        created = (
            await test_client.post(NOTES, json={"title": "draft"}, headers=headers)
        ).json()
        url = f"{NOTES}/{created['id']}"

        updated = await test_client.put(
            url,
            json={"title": "final", "content": "body", "is_public": True},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == "final"
        assert updated.json()["is_public"] is True

        listing = await test_client.get(NOTES, headers=headers)
        assert listing.headers["X-Total-Count"] == "1"
        assert listing.headers["Cache-Control"] == "private, no-store"

        deleted = await test_client.delete(url, headers=headers)
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Note deleted successfully"}
        assert (await test_client.get(url, headers=headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_empty_title_is_400(self, test_client, login_as):
        headers, _ = await login_as("alice")
        response = await test_client.post(NOTES, json={"title": ""}, headers=headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_400(self, test_client, login_as):
        headers, _ = await login_as("alice")
        response = await test_client.get(f"{NOTES}/abc", headers=headers)
        assert response.status_code == 400


class TestPublicNotes:

    @pytest.mark.asyncio
    async def test_public_listing_without_token(self, test_client, login_as):
        headers, _ = await login_as("alice")
        await test_client.post(NOTES, json={"title": "open", "is_public": True}, headers=headers)
        await test_client.post(NOTES, json={"title": "closed"}, headers=headers)

        response = await test_client.get("/api/public/notes")

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["open"]
        assert response.headers["X-Total-Count"] == "1"

    @pytest.mark.asyncio
    async def test_private_note_hidden_from_public_lookup(self, test_client, login_as):
        headers, _ = await login_as("alice")
        private = (
            await test_client.post(NOTES, json={"title": "closed"}, headers=headers)
        ).json()

        response = await test_client.get(f"/api/public/notes/{private['id']}")

        assert response.status_code == 404
        assert response.json()["error"] == "Note not found"


class TestPlumbing:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/public/notes")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(NOTES, headers={"X-Request-ID": "trace-1"})
        assert response.json()["request_id"] == "trace-1"
