"""
Authentication flow tests: register, login, me, logout and token checks.
"""

import pytest

from backend.app.core.jwt import create_access_token
from backend.app.core.token_revocation import TOKEN_BLACKLIST_PREFIX


@pytest.mark.asyncio
async def test_health_and_root(client):
    health = await client.get("/health")
    root = await client.get("/")
    
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert health.json()["redis"] == "connected"
    assert root.status_code == 200
    assert "X-Correlation-ID" in health.headers


@pytest.mark.asyncio
async def test_register_returns_token(client, register):
    payload = await register(client, "jdupont", full_name="Jean Dupont")
    
    assert payload["token_type"] == "bearer"
    assert payload["user_id"] == 1
    assert payload["username"] == "jdupont"
    assert payload["full_name"] == "Jean Dupont"
    assert payload["role"] == "client"
    assert payload["access_token"]


@pytest.mark.asyncio
async def test_register_defaults_to_client_role(client):
    response = await client.post("/v1/auth/register", json={
        "email": "nobody@test.com",
        "username": "nobody",
        "password": "secret1",
        "full_name": "No Role",
    })
    
    assert response.status_code == 201
    assert response.json()["role"] == "client"


@pytest.mark.asyncio
async def test_duplicate_username_rejected(client, register):
    await register(client, "jdupont")
    
    response = await client.post("/v1/auth/register", json={
        "email": "other@test.com",
        "username": "jdupont",
        "password": "password123",
        "full_name": "Someone Else",
    })
    
    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_INPUT_002"


@pytest.mark.asyncio
async def test_register_validation_errors_are_400(client):
    response = await client.post("/v1/auth/register", json={
        "email": "not-an-email",
        "username": "ab",
        "password": "123",
        "full_name": "",
    })
    
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    assert body["details"]["errors"]


@pytest.mark.asyncio
async def test_login_and_me(client, register, auth):
    await register(client, "accountant", role="accountant", full_name="Comptable Admin")
    
    login = await client.post("/v1/auth/login", json={"username": "accountant", "password": "password123"})
    assert login.status_code == 200
    token = login.json()
    assert token["role"] == "accountant"
    
    me = await client.get("/v1/auth/me", headers=auth(token))
    assert me.status_code == 200
    body = me.json()
    assert body["username"] == "accountant"
    assert body["full_name"] == "Comptable Admin"
    assert "hashed_password" not in body
    assert "password" not in body


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, register):
    await register(client, "jdupont")
    
    response = await client.post("/v1/auth/login", json={"username": "jdupont", "password": "wrong"})
    
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_login_unknown_user(client):
    response = await client.post("/v1/auth/login", json={"username": "ghost", "password": "password123"})
    
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_token_is_401(client):
    response = await client.get("/v1/auth/me")
    
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_garbage_token_is_401(client):
    response = await client.get("/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_401(client):
    token = create_access_token({"sub": "ghost", "user_id": 404, "role": "client"})
    
    response = await client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_logout_revokes_token(client, register, auth, mock_redis):
    token = await register(client, "jdupont")
    headers = auth(token)
    
    logout = await client.post("/v1/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.json()["revoked"] is True
    assert f"{TOKEN_BLACKLIST_PREFIX}{token['access_token']}" in mock_redis.store
    
    me = await client.get("/v1/auth/me", headers=headers)
    assert me.status_code == 401
    assert me.json()["error_code"] == "ERR_AUTH_002"
