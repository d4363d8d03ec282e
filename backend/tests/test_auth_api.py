"""
API tests for registration, login and user accounts
"""

from conftest import register


class TestRegisterAndLogin:
    """Tests for /auth endpoints."""

    async def test_register_returns_token_and_user(self, client):
        """A fresh account is a plain active user."""
        result = await register(client, "carol@acme.io", "Carol")
        assert result["user"]["email"] == "carol@acme.io"
        assert result["user"]["role"] == "user"
        assert result["user"]["is_active"] is True

    async def test_duplicate_email_conflicts(self, client, alice):
        response = await client.post(
            "/auth/register",
            json={"email": "alice@acme.io", "password": "secret123", "name": "A", "last_name": "B"},
        )
        assert response.status_code == 409

    async def test_malformed_payload_is_bad_request(self, client):
        response = await client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "123", "name": "", "last_name": "B"},
        )
        assert response.status_code == 400

    async def test_login(self, client, alice):
        response = await client.post(
            "/auth/login", json={"email": "alice@acme.io", "password": "secret123"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["id"] == alice["user"]["id"]

    async def test_login_wrong_password(self, client, alice):
        response = await client.post(
            "/auth/login", json={"email": "alice@acme.io", "password": "wrong-one"}
        )
        assert response.status_code == 401

    async def test_login_unknown_email(self, client):
        response = await client.post(
            "/auth/login", json={"email": "nobody@acme.io", "password": "secret123"}
        )
        assert response.status_code == 401


class TestCurrentUser:
    """Tests for /users endpoints."""

    async def test_requires_token(self, client):
        response = await client.get("/users/me")
        assert response.status_code == 401

    async def test_rejects_garbage_token(self, client):
        response = await client.get("/users/me", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401

    async def test_me(self, client, alice):
        response = await client.get("/users/me", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Alice"

    async def test_update_me(self, client, alice):
        response = await client.patch(
            "/users/me", json={"last_name": "Liddell"}, headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["last_name"] == "Liddell"
        assert response.json()["name"] == "Alice"

    async def test_update_email_to_taken_one_conflicts(self, client, alice, bob):
        response = await client.patch(
            "/users/me", json={"email": "bob@acme.io"}, headers=alice["headers"]
        )
        assert response.status_code == 409

    async def test_change_password(self, client, alice):
        response = await client.patch(
            "/users/me/password",
            json={"old_password": "secret123", "new_password": "better456"},
            headers=alice["headers"],
        )
        assert response.status_code == 200

        login = await client.post(
            "/auth/login", json={"email": "alice@acme.io", "password": "better456"}
        )
        assert login.status_code == 200

    async def test_change_password_wrong_old(self, client, alice):
        response = await client.patch(
            "/users/me/password",
            json={"old_password": "guessing", "new_password": "better456"},
            headers=alice["headers"],
        )
        assert response.status_code == 401

    async def test_search_by_email(self, client, alice, bob):
        response = await client.get("/users", params={"email": "bob"}, headers=alice["headers"])
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == ["bob@acme.io"]

    async def test_only_admin_deletes_users(self, client, alice, bob):
        response = await client.delete(f"/users/{bob['user']['id']}", headers=alice["headers"])
        assert response.status_code == 403
