"""Pytest fixtures and configuration for charmlens tests."""

import os

# Keep the app's module-level engine off the local database file
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from charmlens.auth.jwt import create_access_token, ADMIN_ROLE
from charmlens.database.database import Base
from charmlens.database.history_repository import AnalysisHistoryRepository
from charmlens.database.store import InMemoryKeyedStore, SQLAlchemyKeyedStore
from charmlens.engine.classifier import classify_points
from charmlens.models.analysis import AnalysisHistoryRecord, GeneratedOutput, GeneratedPoint
from charmlens.models.audit_entry import AuditActionKind, AuditEntry, AuditSeverity


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Tuesday
FIXED_NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from charmlens.database import models  # noqa: F401

    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_backend():
    """Process-local keyed store."""
    return InMemoryKeyedStore()


@pytest.fixture
def sql_backend(db_session: Session):
    """Keyed store over the test database."""
    return SQLAlchemyKeyedStore(db_session)


@pytest.fixture
def history_repository(memory_backend):
    return AnalysisHistoryRepository(memory_backend)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def make_entry():
    """Factory for AuditEntry objects with sensible defaults."""

    def _make_entry(
        timestamp: datetime = FIXED_NOW,
        action_kind: AuditActionKind = AuditActionKind.USER_LOGIN,
        actor_id: str = "user-1",
        actor_email: Optional[str] = "user1@example.com",
        description: str = "User login succeeded",
        severity: AuditSeverity = AuditSeverity.LOW,
        success: bool = True,
        **extra,
    ) -> AuditEntry:
        return AuditEntry(
            id=str(uuid.uuid4()),
            timestamp=timestamp,
            actor_id=actor_id,
            actor_email=actor_email,
            action_kind=action_kind,
            description=description,
            severity=severity,
            success=success,
            **extra,
        )

    return _make_entry


@pytest.fixture
def make_record(test_user_id):
    """Factory for AnalysisHistoryRecord objects.

    `titles` become the generated points (description left empty); the
    categorization is computed from them the same way the service does.
    """

    def _make_record(
        timestamp: datetime = FIXED_NOW,
        titles: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        user_rating: Optional[int] = None,
        session_duration_seconds: float = 60.0,
        user_id: Optional[str] = None,
    ) -> AnalysisHistoryRecord:
        points = [GeneratedPoint(title=title) for title in (titles or ["Our service"])]
        return AnalysisHistoryRecord(
            id=str(uuid.uuid4()),
            user_id=user_id or test_user_id,
            timestamp=timestamp,
            user_input="We are a software company",
            generated_output=GeneratedOutput(points=points),
            categorization=classify_points(points),
            session_duration_seconds=session_duration_seconds,
            user_rating=user_rating,
            tags=tags or [],
        )

    return _make_record


class FakeGenerationClient:
    """Stands in for OpenAIClient; returns a canned output (or None)."""

    def __init__(self, output: Optional[GeneratedOutput] = None):
        self.output = output
        self.facts: List[str] = []

    def generate_points(self, fact: str) -> Optional[GeneratedOutput]:
        self.facts.append(fact)
        return self.output


@pytest.fixture
def generated_output():
    return GeneratedOutput(
        points=[
            GeneratedPoint(title="Excellent service quality", description="Customers value our support"),
            GeneratedPoint(title="Strong team", description="Talented engineers with deep expertise"),
            GeneratedPoint(title="Future growth", description="Expanding into new markets"),
        ],
        summary="A growing company with a strong team",
    )


@pytest.fixture
def generation_client(generated_output):
    return FakeGenerationClient(generated_output)


@pytest.fixture
def user_token(test_user_id):
    return create_access_token(test_user_id, email="test@example.com", name="Test User")


@pytest.fixture
def admin_token():
    return create_access_token("admin-1", email="admin@example.com", name="Admin", role=ADMIN_ROLE)


@pytest.fixture
def user_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def test_client(db_session: Session, generation_client):
    """Create a FastAPI test client with overridden database and generation dependencies."""
    from charmlens.api.app import app, get_generation_client
    from charmlens.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_client] = lambda: generation_client

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
