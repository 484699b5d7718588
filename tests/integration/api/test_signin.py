"""
Integration tests for POST /api/auth/signin
"""
import pytest
from httpx import AsyncClient
from jose import jwt

from config import ApplicationConfig


@pytest.mark.asyncio
async def test_successful_signin(client: AsyncClient, create_user):
    user = await create_user("signin@example.com", "SecurePass123!")

    response = await client.post(
        "/api/auth/signin", json={"email": "signin@example.com", "password": "SecurePass123!"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "signin@example.com"
    payload = jwt.decode(data["access_token"], ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
    assert payload["sub"] == str(user.id)


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_look_the_same(client: AsyncClient, create_user):
    await create_user("signin@example.com", "SecurePass123!")

    wrong = await client.post(
        "/api/auth/signin", json={"email": "signin@example.com", "password": "WrongPass123!"}
    )
    unknown = await client.post(
        "/api/auth/signin", json={"email": "nobody@example.com", "password": "WrongPass123!"}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


@pytest.mark.asyncio
async def test_missing_fields(client: AsyncClient):
    response = await client.post("/api/auth/signin", json={"email": "signin@example.com"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELDS"


@pytest.mark.asyncio
async def test_non_string_fields_rejected(client: AsyncClient):
    response = await client.post("/api/auth/signin", json={"email": 42, "password": 42})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELDS"
