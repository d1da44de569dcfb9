"""
Global pytest configuration and fixtures for the Voluntarily API test suite.
"""

import os

# Set test environment variables before settings are loaded
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-32-chars"

from typing import Any, Callable, Dict, Generator

import jwt
import pytest
from fastapi.testclient import TestClient

from src.core.database import get_db
from src.domains.auth.dependencies import get_session
from src.main import app
from src.shared.abilities.models import Session
from src.shared.events import EventBus, get_event_bus

# Import fixtures from fixture modules
from tests.fixtures.interest_fixtures import *  # noqa: F403, F401
from tests.helpers.fake_prisma import FakePrisma


@pytest.fixture
def test_jwt_secret() -> str:
    """JWT secret for generating test tokens."""
    return "test-secret-key-for-testing-only-32-chars"


@pytest.fixture
def valid_jwt_payload() -> Dict[str, Any]:
    """Valid identity token payload for testing."""
    return {
        "sub": "person-2",
        "email": "vera@example.com",
        "aud": "authenticated",
        "iss": "voluntarily",
    }


@pytest.fixture
def valid_jwt_token(test_jwt_secret: str, valid_jwt_payload: Dict[str, Any]) -> str:
    """Generate a valid JWT token for testing."""
    return jwt.encode(valid_jwt_payload, test_jwt_secret, algorithm="HS256")


@pytest.fixture
def auth_headers(valid_jwt_token: str) -> Dict[str, str]:
    """Generate authentication headers with valid JWT token."""
    return {"Authorization": f"Bearer {valid_jwt_token}"}


@pytest.fixture
def event_bus() -> EventBus:
    """Isolated event bus so subscriptions never leak between tests."""
    return EventBus()


@pytest.fixture
def client_for(
    fake_db: FakePrisma, event_bus: EventBus
) -> Generator[Callable[[Session], TestClient], None, None]:
    """
    Build a TestClient acting as the given session against the fake database.

    Dependency overrides are cleared after the test.
    """

    def _client(session: Session) -> TestClient:
        app.dependency_overrides[get_db] = lambda: fake_db
        app.dependency_overrides[get_session] = lambda: session
        app.dependency_overrides[get_event_bus] = lambda: event_bus
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def client(fake_db: FakePrisma, event_bus: EventBus) -> Generator[TestClient, None, None]:
    """TestClient with the real session resolution over the fake database."""
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    yield TestClient(app)
    app.dependency_overrides.clear()
