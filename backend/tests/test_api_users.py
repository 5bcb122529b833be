"""
LocalBiz Directory — User Endpoint Tests
==========================================

Runs the real app against an in-memory database (see conftest.test_client).
"""

import pytest

from app.models.user import Role
from app.security.tokens import token_codec


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestRegisterAndLogin:

    @pytest.mark.asyncio
    async def test_register_returns_token_and_user(self, register_user):
        body = await register_user(name="Ada", role="ADMIN")

        assert body["tokenType"] == "bearer"
        assert body["user"]["email"] == "ada@directory.io"
        assert body["user"]["role"] == "ADMIN"
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    @pytest.mark.asyncio
    async def test_login_token_carries_registered_role(self, test_client, register_user):
        registered = await register_user(name="Grace", role="ADMIN", password="pw-123")

        response = await test_client.post(
            "/api/users/login",
            json={"email": "grace@directory.io", "password": "pw-123"},
        )

        assert response.status_code == 200
        identity = token_codec.verify(response.json()["token"])
        assert identity.user_id == registered["user"]["id"]
        assert identity.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_role_defaults_to_user(self, test_client):
        response = await test_client.post(
            "/api/users/register",
            json={"name": "Lin", "email": "lin@directory.io", "password": "pw"},
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "USER"

    @pytest.mark.asyncio
    async def test_email_is_case_insensitive(self, test_client, register_user):
        await register_user(name="Ada", email="Ada@Directory.io", password="pw")

        response = await test_client.post(
            "/api/users/login", json={"email": "ADA@directory.io", "password": "pw"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_duplicate_email_is_400(self, test_client, register_user):
        await register_user(name="Ada")

        response = await test_client.post(
            "/api/users/register",
            json={"name": "Ada2", "email": "ada@directory.io", "password": "other"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "email"

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client, register_user):
        await register_user(name="Ada", password="right")

        response = await test_client.post(
            "/api/users/login", json={"email": "ada@directory.io", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_unknown_email_is_401(self, test_client):
        response = await test_client.post(
            "/api/users/login", json={"email": "nobody@directory.io", "password": "x"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_body_is_400(self, test_client):
        response = await test_client.post(
            "/api/users/register", json={"name": "NoEmail", "password": "pw"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "email" in body["message"]


class TestProfile:

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, test_client):
        response = await test_client.get("/api/users/profile")
        assert response.status_code == 401
        assert response.json()["message"] == "Access denied. No token provided."

    @pytest.mark.asyncio
    async def test_profile_rejects_bad_token(self, test_client):
        response = await test_client.get("/api/users/profile", headers=_auth("junk"))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token."

    @pytest.mark.asyncio
    async def test_profile_returns_caller(self, test_client, register_user):
        registered = await register_user(name="Ada")

        response = await test_client.get(
            "/api/users/profile", headers=_auth(registered["token"])
        )

        assert response.status_code == 200
        assert response.json() == registered["user"]

    @pytest.mark.asyncio
    async def test_token_for_deleted_account_is_404(self, test_client):
        token = token_codec.issue(999, Role.USER)
        response = await test_client.get("/api/users/profile", headers=_auth(token))
        assert response.status_code == 404


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get(
            "/api/users/profile", headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/categories")
        assert response.headers["X-Request-ID"]
