"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from app.infrastructure.config import Settings
from app.main import create_app


@pytest.fixture
def app_settings(database_url: str) -> Settings:
    """Settings pointing at the per-test database."""
    return Settings(
        database_url=database_url,
        log_format="console",
        default_page_size=10,
        max_page_size=100,
    )


@pytest.fixture
def client(app_settings: Settings):
    """Create test client with startup and shutdown run."""
    with TestClient(create_app(app_settings)) as client:
        yield client
