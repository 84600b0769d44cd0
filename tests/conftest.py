"""Shared fixtures: in-memory database, pinned clock, stores and API client."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from sleep_tracker.common.clock import FixedClock
from sleep_tracker.common.config import Config
from sleep_tracker.repositories import SleepLogRepository, UserRepository
from sleep_tracker.stats import SleepStatsEngine
from sleep_tracker.storage import Database


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Clock pinned to 2024-03-15T12:00Z."""
    return FixedClock(NOW)


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with the schema created."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def user_repository(database, clock):
    return UserRepository(database, clock)


@pytest.fixture
def sleep_log_repository(database, clock):
    return SleepLogRepository(database, clock)


@pytest.fixture
def stats_engine(user_repository, sleep_log_repository, clock):
    return SleepStatsEngine(user_repository, sleep_log_repository, clock)


@pytest.fixture
def make_user(user_repository):
    """Factory creating users with unique names."""
    def _make_user(name=None, time_zone="UTC"):
        return user_repository.create(name or f"user_{uuid4().hex[:8]}", time_zone)
    return _make_user


@pytest.fixture
def service(database, clock):
    from sleep_tracker.api.service import SleepTrackerService

    return SleepTrackerService(config=Config(), database=database, clock=clock)


@pytest.fixture
def client(service):
    """API client whose routes use the in-memory service."""
    from fastapi.testclient import TestClient

    from sleep_tracker.api.dependencies import get_service
    from sleep_tracker.api.gateway import app

    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
