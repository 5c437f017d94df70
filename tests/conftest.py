"""
Shared test fixtures for Claude Sync tests.

Every test gets its own settings, data directory and service instance,
so nothing leaks between tests or into ./data.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from claude_sync.config import Settings
from claude_sync.application import create_app
from claude_sync.schemas.sync import format_timestamp
from claude_sync.services import SyncService
from claude_sync.store import HistoryLog, JsonFileBackend, ProjectStore

TEST_KEY = "test-secret"


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> str:
        self.current += timedelta(seconds=1)
        return format_timestamp(self.current)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        claude_sync_key=TEST_KEY,
        storage_backend="file",
        data_path=str(tmp_path / "data"),
    )


@pytest.fixture
def backend(settings) -> JsonFileBackend:
    return JsonFileBackend(settings.data_path)


@pytest.fixture
def projects(backend) -> ProjectStore:
    return ProjectStore(backend)


@pytest.fixture
def history(backend) -> HistoryLog:
    return HistoryLog(backend)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def service(projects, history, backend, clock) -> SyncService:
    return SyncService(projects, history, backend=backend, clock=clock)


@pytest.fixture
def app(settings, service):
    return create_app(settings, service)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {TEST_KEY}"}
