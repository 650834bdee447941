"""API tests for registration, login and the bearer token gate."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from smilehub.api.v1.endpoints.auth import security
from smilehub.core.security import SecurityManager


@pytest.mark.asyncio
async def test_register_returns_id_and_email(client: AsyncClient) -> None:
    response = await client.post("/api/v1/register", json={"email": "demo@x.com", "password": "pw123456"})

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "demo@x.com"
    assert isinstance(body["id"], int)


@pytest.mark.asyncio
async def test_duplicate_registration_conflicts(client: AsyncClient) -> None:
    payload = {"email": "demo@x.com", "password": "pw123456"}
    await client.post("/api/v1/register", json=payload)

    response = await client.post("/api/v1/register", json=payload)

    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "demo@x.com"},
        {"email": "not-an-email", "password": "pw123456"},
        {"email": "demo@x.com", "password": "123"},
    ],
)
async def test_register_validation(client: AsyncClient, payload) -> None:
    response = await client.post("/api/v1/register", json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_returns_token(client: AsyncClient) -> None:
    await client.post("/api/v1/register", json={"email": "demo@x.com", "password": "pw123456"})

    response = await client.post("/api/v1/login", json={"email": "demo@x.com", "password": "pw123456"})

    assert response.status_code == 200
    body = response.json()
    assert body["accessToken"]
    assert body["tokenType"] == "bearer"
    assert security.decode_token(body["accessToken"]).email == "demo@x.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "demo@x.com", "password": "wrong-password"},
        {"email": "nobody@x.com", "password": "pw123456"},
    ],
)
async def test_login_mismatch_is_401(client: AsyncClient, payload) -> None:
    await client.post("/api/v1/register", json={"email": "demo@x.com", "password": "pw123456"})

    response = await client.post("/api/v1/login", json=payload)

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/patients")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_bad_signature_is_403(client: AsyncClient, auth_headers) -> None:
    forged = SecurityManager(secret_key="attacker-secret-key-0123456789abcdef").create_tenant_token(
        1, "demo@x.com"
    )

    response = await client.get("/api/v1/patients", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_expired_token_is_403(client: AsyncClient, auth_headers) -> None:
    expired = security.create_tenant_token(1, "demo@x.com", expires_delta=timedelta(minutes=-1))

    response = await client.get("/api/v1/patients", headers={"Authorization": f"Bearer {expired}"})

    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_token_for_unknown_tenant_is_403(client: AsyncClient) -> None:
    token = security.create_tenant_token(9999, "ghost@x.com")

    response = await client.get("/api/v1/patients", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers) -> None:
    response = await client.get("/api/v1/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "demo@x.com"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, auth_headers) -> None:
    response = await client.post(
        "/api/v1/change-password",
        json={"currentPassword": "wrong-one", "newPassword": "brand-new-pw"},
        headers=auth_headers,
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/change-password",
        json={"currentPassword": "pw123456", "newPassword": "brand-new-pw"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    response = await client.post("/api/v1/login", json={"email": "demo@x.com", "password": "brand-new-pw"})
    assert response.status_code == 200
