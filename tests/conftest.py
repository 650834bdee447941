"""Pytest configuration and shared fixtures for SmileHub backend tests.

This module provides common fixtures for testing the backend components
including database sessions, the API client and test data factories.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from smilehub.core.security import SecurityManager
from smilehub.models.base import create_engine_from_url, get_db, init_db
from smilehub.models.user import User

TEST_SECRET_KEY = "test-secret-key-for-testing-only-0123456789abcdef"


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with foreign keys enforced."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'smilehub.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def security() -> SecurityManager:
    return SecurityManager(secret_key=TEST_SECRET_KEY, access_token_expire_minutes=60)


@pytest.fixture
async def tenant_factory(db_session: AsyncSession):
    """Insert tenants directly, skipping password hashing."""

    async def _create(email: str) -> User:
        user = User(email=email, password_hash="not-a-real-hash")
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def sample_patient_data() -> dict[str, Any]:
    """Column values for a typical patient."""
    return {
        "name": "John",
        "surname": "Doe",
        "gender": "Male",
        "mobile": "9000000000",
        "age": 42,
        "chief_complaint": "Pain in lower left molar",
        "diagnosis": "Irreversible pulpitis",
        "treatment_plan": "Root canal treatment",
        "treatment_type": "Root Canal",
        "start_date": None,
        "total_fee": 1000,
        "images": [],
        "payments": [],
    }


@pytest.fixture
def app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    """Full application wired to the test database."""
    from smilehub.main import create_application

    application = create_application()

    async def override_get_db():
        async with session_maker() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


async def _register_and_login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    """Create an account through the API and return bearer auth headers."""
    response = await client.post("/api/v1/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text

    response = await client.post("/api/v1/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def register_and_login(client: AsyncClient):
    """Async helper: register + login, returning bearer auth headers."""

    async def _login(email: str, password: str = "pw123456") -> dict[str, str]:
        return await _register_and_login(client, email, password)

    return _login


@pytest.fixture
async def auth_headers(register_and_login) -> dict[str, str]:
    return await register_and_login("demo@x.com", "pw123456")
