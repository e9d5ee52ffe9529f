"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures for unit and integration tests.
"""

import base64
import os
import uuid
from typing import Any, AsyncGenerator, Dict, Tuple
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
from faker import Faker
from httpx import AsyncClient, ASGITransport

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ACCOUNT_REGISTRATION_STRATEGY", "open")

fake = Faker()

TEST_PASSWORD = "SecurePass123!"


# =============================================================================
# Test Data Generators
# =============================================================================

def unique_login() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"


@pytest.fixture
def account_payload() -> Dict[str, Any]:
    """Camel-cased body for POST /accounts/create."""
    return {
        "login": unique_login(),
        "name": fake.name(),
        "email": fake.email(),
        "language": "en",
        "timeZone": "Europe/Paris",
        "newPassword": TEST_PASSWORD,
    }


@pytest.fixture
def workspace_id() -> str:
    return f"ws-{uuid.uuid4().hex[:8]}"


# =============================================================================
# Authentication Helpers
# =============================================================================

@pytest.fixture
def mock_jwt_secret():
    """Provide a consistent JWT secret for testing."""
    return "test-secret-key-for-testing-purposes-only-32chars"


def create_auth_header(token: str) -> Dict[str, str]:
    """Create an authorization header with a bearer token."""
    return {"Authorization": f"Bearer {token}"}


def create_basic_auth_header(login: str, password: str) -> Dict[str, str]:
    credentials = base64.b64encode(f"{login}:{password}".encode()).decode()
    return {"Authorization": f"Basic {credentials}"}


@pytest.fixture
def bearer_header():
    return create_auth_header


@pytest.fixture
def basic_header():
    return create_basic_auth_header


# =============================================================================
# Mock Objects
# =============================================================================

@pytest.fixture
def mock_db_session():
    """Create a mock database session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.merge = AsyncMock()
    session.delete = AsyncMock()
    session.add = Mock()
    return session


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def database():
    """
    Fresh in-memory schema for the current test.

    The engine is bound to the test's event loop and disposed afterwards, so
    every test starts from empty tables.
    """
    from app.core.db_client import db

    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()


@pytest_asyncio.fixture
async def registered_account(database) -> Tuple[str, str]:
    """An enabled regular account; returns (login, password)."""
    from app.services.account_service import account_service

    login = unique_login()
    await account_service.create_account(
        login, fake.name(), fake.email(), "en", TEST_PASSWORD, "UTC", enabled=True
    )
    return login, TEST_PASSWORD


@pytest_asyncio.fixture
async def other_account(database) -> Tuple[str, str]:
    from app.services.account_service import account_service

    login = unique_login()
    await account_service.create_account(
        login, fake.name(), fake.email(), "fr", TEST_PASSWORD, "UTC", enabled=True
    )
    return login, TEST_PASSWORD


@pytest_asyncio.fixture
async def admin_account(database) -> Tuple[str, str]:
    from app.services.account_service import account_service

    login = f"admin_{uuid.uuid4().hex[:8]}"
    await account_service.ensure_admin_account(login, TEST_PASSWORD, "admin@example.com")
    return login, TEST_PASSWORD


@pytest.fixture
def admin_validation(monkeypatch):
    """Switch registration to administrator validation for one test."""
    from app.core.config import settings

    monkeypatch.setattr(settings, "ACCOUNT_REGISTRATION_STRATEGY", "admin_validation")


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create a test FastAPI application instance."""
    # Import here to ensure test environment is set
    from app.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


__all__ = [
    "fake",
    "TEST_PASSWORD",
    "unique_login",
    "create_auth_header",
    "create_basic_auth_header",
]
