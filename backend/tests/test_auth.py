"""
Tests for authentication endpoints: registration, login and token checks.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import select, func

from booking_api.core.config import get_settings
from booking_api.core.security import create_access_token
from booking_api.models import User


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns user data."""
    response = await client.post("/api/register", json={
        "name": "New User",
        "email": "new@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["name"] == "New User"
    assert "id" in data
    assert "password" not in data
    assert "hashed_password" not in data  # Never expose password hash


@pytest.mark.asyncio
async def test_register_stores_hash_not_plaintext(client: AsyncClient, db_session):
    await client.post("/api/register", json={
        "name": "Hashed",
        "email": "hashed@example.com",
        "password": "plaintext-secret",
    })
    stored = (
        await db_session.execute(select(User.hashed_password).where(User.email == "hashed@example.com"))
    ).scalar_one()
    assert stored != "plaintext-secret"
    assert stored.startswith("$2")


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user, db_session):
    """Duplicate email returns 400 and adds no row."""
    response = await client.post("/api/register", json={
        "name": "Someone Else",
        "email": "test@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}

    count = (
        await db_session.execute(select(func.count(User.id)).where(User.email == "test@example.com"))
    ).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post("/api/register", json={
        "name": "Bad Email",
        "email": "not-an-email",
        "password": "securepassword123",
    })
    assert response.status_code == 422
    assert response.json()["error"] == "Invalid request"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return a token whose claims match the stored user."""
    response = await client.post("/api/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"] == {"id": test_user.id, "name": "Test User", "email": "test@example.com"}

    settings = get_settings()
    claims = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["id"] == test_user.id
    assert claims["email"] == "test@example.com"
    assert "exp" in claims


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_email_look_the_same(client: AsyncClient, test_user):
    wrong_password = await client.post("/api/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    unknown_email = await client.post("/api/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_protected_route_without_token(client: AsyncClient):
    response = await client.get("/api/profile")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_protected_route_with_garbage_token(client: AsyncClient):
    response = await client.get("/api/profile", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 403
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_protected_route_with_expired_token(client: AsyncClient, test_user):
    token = create_access_token(test_user.id, test_user.email, expires_delta=timedelta(seconds=-10))
    response = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_token_signed_with_other_key_is_rejected(client: AsyncClient, test_user):
    token = jwt.encode({"id": test_user.id, "email": test_user.email}, "wrong-key", algorithm="HS256")
    response = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
