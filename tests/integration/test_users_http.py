"""End-to-end tests for the users HTTP API."""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.application.services import UserService
from users_api.domain.errors import StoreError
from users_api.infrastructure.auth import create_access_token
from users_api.infrastructure.middleware.error_handler import STORE_ERROR_MESSAGE
from users_api.infrastructure.security import PasslibPasswordHasher
from users_api.main import create_app
from users_api.presentation.http.users import get_user_service

USERS = "/api/v1/users"


def _registration(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "email": "a@example.com",
        "name": "A",
        "username": "a1",
        "password": "p",
        "password_confirmation": "p",
    }
    data.update(overrides)
    return data


@pytest.fixture
async def created_user(client) -> dict:
    response = await client.post(USERS, json=_registration())
    assert response.status_code == 201
    return response.json()["user"]


class TestCreateUser:
    """POST /api/v1/users"""

    async def test_creates_pending_user(self, client):
        response = await client.post(USERS, json=_registration(email="A@Example.com"))

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == "a@example.com"
        assert user["status"] == "pending"
        assert "password" not in user
        assert "password_hash" not in user

    async def test_invalid_payload(self, client):
        response = await client.post(
            USERS,
            json={"email": "nope", "name": "A", "username": "a1", "password": "p"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"]["email"] == [
            "The email must be a valid email address."
        ]
        assert "password_confirmation" in error["details"]["fields"]

    async def test_duplicate_email(self, client, created_user):
        response = await client.post(USERS, json=_registration(username="other"))

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "CONFLICT"
        assert error["details"]["fields"] == {"email": ["has already been taken"]}


class TestGetUser:
    """GET /api/v1/users/{id}"""

    async def test_found(self, client, created_user):
        response = await client.get(f"{USERS}/{created_user['id']}")

        assert response.status_code == 200
        assert response.json()["user"] == created_user

    async def test_malformed_id(self, client):
        response = await client.get(f"{USERS}/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_IDENTIFIER"

    async def test_missing(self, client):
        response = await client.get(f"{USERS}/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"


class TestFindUsers:
    """GET /api/v1/users"""

    async def test_lists_matching(self, client, created_user):
        await client.post(USERS, json=_registration(email="b@example.com", username="b1"))

        response = await client.get(USERS, params={"username": "a1"})

        assert response.status_code == 200
        assert [u["id"] for u in response.json()["users"]] == [created_user["id"]]

    async def test_empty_result_is_not_found(self, client):
        response = await client.get(USERS, params={"status": "active"})

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Users with given filter not found."

    async def test_invalid_status_filter(self, client):
        response = await client.get(USERS, params={"status": "banned"})

        assert response.status_code == 400
        assert "status" in response.json()["error"]["details"]["fields"]


class TestUpdateUser:
    """PATCH /api/v1/users/{id}"""

    async def test_updates_sent_fields(self, client, created_user):
        response = await client.patch(
            f"{USERS}/{created_user['id']}", json={"status": "active"}
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["status"] == "active"
        assert user["name"] == created_user["name"]

    async def test_invalid_status(self, client, created_user):
        response = await client.patch(
            f"{USERS}/{created_user['id']}", json={"status": "banned"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"]["fields"]["status"] == [
            "The selected status is invalid. Allowed: active, passive, pending."
        ]

    async def test_username_conflict(self, client, created_user):
        await client.post(USERS, json=_registration(email="b@example.com", username="b1"))

        response = await client.patch(
            f"{USERS}/{created_user['id']}", json={"username": "b1"}
        )

        assert response.status_code == 409

    async def test_missing(self, client):
        response = await client.patch(f"{USERS}/{uuid4()}", json={"name": "X"})

        assert response.status_code == 404


class TestDeleteUser:
    """DELETE /api/v1/users/{id}"""

    async def test_deletes(self, client, created_user):
        response = await client.delete(f"{USERS}/{created_user['id']}")

        assert response.status_code == 204
        assert (await client.get(f"{USERS}/{created_user['id']}")).status_code == 404

    async def test_missing(self, client):
        response = await client.delete(f"{USERS}/{uuid4()}")

        assert response.status_code == 404


class TestAuthorizedUser:
    """GET /api/v1/users/me"""

    async def test_requires_token(self, client):
        response = await client.get(f"{USERS}/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    async def test_returns_caller(self, client, settings, created_user):
        token = create_access_token(created_user["id"], settings)

        response = await client.get(
            f"{USERS}/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == created_user["id"]

    async def test_bad_token(self, client):
        response = await client.get(
            f"{USERS}/me", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    async def test_identity_without_record(self, client, settings):
        token = create_access_token(str(uuid4()), settings)

        response = await client.get(
            f"{USERS}/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 404


class _BrokenRepository:
    async def find_all(self, user_filter=None):
        raise StoreError(
            message="Storage operation 'find_all' failed",
            operation="find_all",
            details={"table": "users"},
        )


async def test_store_failure_hides_internals(settings, engine):
    app = create_app(settings)
    app.dependency_overrides[get_user_service] = lambda: UserService(
        repository=_BrokenRepository(),
        hasher=PasslibPasswordHasher(rounds=1000),
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(USERS)

    assert response.status_code == 500
    assert response.json()["error"] == {
        "code": "STORE_ERROR",
        "message": STORE_ERROR_MESSAGE,
        "details": {},
        "retryable": False,
    }


class TestMalformedRequests:
    """Type and syntax errors are reported as validation errors."""

    async def test_non_string_field(self, client):
        response = await client.post(USERS, json=_registration(name=7))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"] == {"name": ["The name must be a string."]}

    async def test_non_string_status(self, client, created_user):
        response = await client.patch(f"{USERS}/{created_user['id']}", json={"status": 5})

        assert response.status_code == 400
        assert list(response.json()["error"]["details"]["fields"]) == ["status"]

    async def test_null_name(self, client, created_user):
        response = await client.patch(f"{USERS}/{created_user['id']}", json={"name": None})

        assert response.status_code == 400
        assert response.json()["error"]["details"]["fields"] == {
            "name": ["The name field is required."]
        }

    async def test_invalid_json(self, client):
        response = await client.post(
            USERS,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "body" in error["details"]["fields"]

    async def test_limit_out_of_range(self, client):
        response = await client.get(USERS, params={"limit": 0})

        assert response.status_code == 400
        assert "limit" in response.json()["error"]["details"]["fields"]
