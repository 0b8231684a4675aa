"""Test configuration and fixtures."""

import os
from datetime import datetime, timedelta
from typing import Callable, Generator, List

import pytest

# Set environment variables BEFORE importing the app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_JSON"] = "false"

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

from taskboard.main import app
from taskboard.core.cache import get_cache
from taskboard.db.database import get_db, engine
from taskboard.db.models import Base, Task
from taskboard.models.enums import TaskStatus, TaskPriority, TaskLabel


# Create testing session using the engine from database module (configured for SQLite via env)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Clear cache before each test for isolation
    get_cache().clear()
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        get_cache().clear()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_tasks(db: Session) -> Callable[..., List[Task]]:
    """Insert tasks and return them with ids loaded.

    Each spec is a dict of Task attributes; missing fields get defaults and
    created_at defaults to BASE_TIME plus one minute per position.
    """

    def _make(*specs: dict) -> List[Task]:
        tasks = []
        for i, spec in enumerate(specs):
            fields = {
                "title": f"Task {i + 1}",
                "status": TaskStatus.TODO,
                "label": TaskLabel.BUG,
                "priority": TaskPriority.LOW,
                "created_at": BASE_TIME + timedelta(minutes=i),
            }
            fields.update(spec)
            tasks.append(Task(**fields))
        db.add_all(tasks)
        db.commit()
        ids = [task.id for task in tasks]
        # End the transaction opened by reading ids so queries start idle
        db.commit()
        assert all(ids)
        return tasks

    return _make


@pytest.fixture
def twelve_tasks(make_tasks) -> List[Task]:
    """Twelve tasks created one minute apart, titled Task 1..Task 12."""
    return make_tasks(*[{} for _ in range(12)])
