"""Pytest fixtures and configuration for nexushub tests."""

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from nexushub.database.database import init_db
from nexushub.integrations.openai_client import AssistantClient, LinkAnalysis, ParsedEvent
from nexushub.models.chat import ChatMessage, ChatRole
from nexushub.models.event import CalendarEvent, EventType
from nexushub.models.link import Category, LinkItem
from nexushub.models.password import PasswordItem, PasswordStrength
from nexushub.models.timestamps import now_ms
from nexushub.storage.backend import LocalBackend
from nexushub.storage.kv_store import MemoryKeyValueStore, SqlKeyValueStore


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

HOUR_MS = 60 * 60 * 1000


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "user-123"


@pytest.fixture
def other_user_id():
    return "user-456"


@pytest.fixture
def memory_store():
    """Fresh in-memory key-value store with the default quota."""
    return MemoryKeyValueStore()


@pytest.fixture
def backend(memory_store):
    """Local backend over the in-memory store, without simulated latency."""
    return LocalBackend(memory_store, latency_ms=0)


@pytest.fixture(scope="function")
def sql_session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    init_db(engine_override=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sql_session_factory):
    return SqlKeyValueStore(session_factory=sql_session_factory)


@pytest.fixture
def sample_link(test_user_id):
    return LinkItem(
        user_id=test_user_id,
        url="https://docs.python.org/3/",
        title="Python Docs",
        category=Category.EDUCATION,
        tags=["python", "docs"],
    )


@pytest.fixture
def sample_password(test_user_id):
    return PasswordItem(
        user_id=test_user_id,
        site="github.com",
        username="octocat",
        password="hunter2",
        category=Category.WORK,
        strength=PasswordStrength.WEAK,
    )


@pytest.fixture
def sample_event(test_user_id):
    return CalendarEvent(
        user_id=test_user_id,
        title="Team sync",
        date="2030-01-15T10:00:00+00:00",
        type=EventType.MEETING,
    )


@pytest.fixture
def make_chat():
    """Factory for chat messages `age_hours` old."""
    def _make(index: int, age_hours: float = 0.0, role: ChatRole = ChatRole.USER) -> ChatMessage:
        return ChatMessage(
            id=f"msg-{index}",
            role=role,
            text=f"message {index}",
            timestamp=now_ms() - int(age_hours * HOUR_MS),
        )
    return _make


@pytest.fixture
def fake_assistant():
    """AssistantClient stand-in with canned answers."""
    assistant = MagicMock(spec=AssistantClient)
    assistant.chat.return_value = "You have 1 link saved."
    assistant.analyze_link.return_value = LinkAnalysis(
        suggested_title="Example", category=Category.WORK, tags=["example"]
    )
    assistant.parse_event.return_value = ParsedEvent(
        title="Dentist", date="2030-03-01T15:00:00+00:00", type=EventType.REMINDER
    )
    assistant.productivity_tip.return_value = "Batch your email."
    return assistant


@pytest.fixture
def api_backend():
    """Backend shared by the API under test (no single-user session record)."""
    return LocalBackend(MemoryKeyValueStore(), latency_ms=0, remember_session=False)


@pytest.fixture
def test_client(api_backend, fake_assistant):
    """Create a FastAPI test client with overridden backend and assistant dependencies."""
    from nexushub.api.app import app
    from nexushub.auth.dependencies import get_assistant, get_backend

    app.dependency_overrides[get_backend] = lambda: api_backend
    app.dependency_overrides[get_assistant] = lambda: fake_assistant

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(test_client):
    """Register a user through the API and return bearer headers."""
    response = test_client.post(
        "/api/auth/register",
        json={"email": "ada@example.com", "password": "s3cret!", "name": "Ada"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
