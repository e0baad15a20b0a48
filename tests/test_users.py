"""
User endpoint tests — registering users and reading / updating the
caller's own account.
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Create user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_user(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={
        "username": "newuser",
        "email": "newuser@example.com",
        "bio": "I am new here",
    })
    assert resp.status_code == 201
    user = resp.json()
    assert user["username"] == "newuser"
    assert user["email"] == "newuser@example.com"
    assert user["bio"] == "I am new here"
    assert user["image"] is None
    assert "id" in user
    assert "password" not in user


@pytest.mark.asyncio
async def test_create_user_missing_username(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={"email": "nousername@example.com"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_user_missing_email(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={"username": "noemail"})
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_current_user(async_client: AsyncClient):
    created = (await async_client.post("/api/users", json={
        "username": "me", "email": "me@example.com",
    })).json()

    resp = await async_client.get("/api/user", headers={"X-User-Id": str(created["id"])})
    assert resp.status_code == 200
    assert resp.json()["username"] == "me"


@pytest.mark.asyncio
async def test_get_current_user_requires_identity(async_client: AsyncClient):
    resp = await async_client.get("/api/user")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_invalid_header(async_client: AsyncClient):
    resp = await async_client.get("/api/user", headers={"X-User-Id": "not-a-number"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user_unknown(async_client: AsyncClient):
    resp = await async_client.get("/api/user", headers={"X-User-Id": "9999"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_current_user(async_client: AsyncClient):
    created = (await async_client.post("/api/users", json={
        "username": "changer", "email": "changer@example.com",
    })).json()
    headers = {"X-User-Id": str(created["id"])}

    resp = await async_client.put("/api/user", headers=headers, json={
        "bio": "Updated bio", "image": "https://img.example/me.png",
    })
    assert resp.status_code == 200
    user = resp.json()
    assert user["bio"] == "Updated bio"
    assert user["image"] == "https://img.example/me.png"
    assert user["username"] == "changer"
