"""
Arboriza Backend - Auth Tests
==============================

What we test:
    ✅ Registration lowercases the username and returns 201
    ✅ Duplicate usernames (any case) → 400, no second row
    ✅ Missing fields → 400 before any store access
    ✅ Login success / wrong password (401) / unknown user (404)
    ✅ Unique-constraint race reported as a conflict
    ✅ Store failure during registration → 500 with a generic message
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from arboriza.exceptions import ConflictError, StoreError, ValidationError
from arboriza.models.user import User
from arboriza.services.auth_service import AuthService


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_success(self, client):
        response = await client.post(
            "/api/auth/register", json={"username": "Maria", "password": "Segredo1"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["user"]["username"] == "maria"
        assert isinstance(body["user"]["id"], int)
        assert "password" not in body["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_case_insensitive(self, client, row_count, make_user):
        await make_user("joao", "abc")

        response = await client.post(
            "/api/auth/register", json={"username": "JOAO", "password": "other"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "conflict"
        assert await row_count(User) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "ana"},
            {"password": "x"},
            {"username": "", "password": "x"},
            {},
        ],
    )
    async def test_register_missing_fields(self, client, row_count, payload):
        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "validation_error"
        assert await row_count(User) == 0


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, client, make_user):
        user = await make_user("carla", "pw123")

        response = await client.post(
            "/api/auth/login", json={"username": "Carla", "password": "pw123"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"]
        assert body["user"] == {"id": user["id"], "username": "carla"}

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, make_user):
        await make_user("carla", "pw123")

        response = await client.post(
            "/api/auth/login", json={"username": "carla", "password": "PW123"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client):
        response = await client.post(
            "/api/auth/login", json={"username": "ghost", "password": "x"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_login_missing_password(self, client):
        response = await client.post("/api/auth/login", json={"username": "carla"})

        assert response.status_code == 400


class TestAuthServiceStoreFailures:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_unique_violation_is_conflict(self, mock_db_session):
        """A concurrent registration that slips past the pre-check still gets a conflict."""
        lookup = MagicMock()
        lookup.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = lookup
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.username")
        )

        with pytest.raises(ConflictError):
            await self.service.register(mock_db_session, "Race", "pw")

    @pytest.mark.asyncio
    async def test_store_failure_is_generic_store_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        with pytest.raises(StoreError) as exc_info:
            await self.service.register(mock_db_session, "maria", "pw")

        assert exc_info.value.expose_detail is False
        assert "connection refused" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_validation_happens_before_store_access(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.login(mock_db_session, None, "pw")

        mock_db_session.execute.assert_not_awaited()
