"""Shared fixtures for catalog tests.

Each test gets its own SQLite database file under ``tmp_path``.
"""

from pathlib import Path

import pytest

from app.catalog.pagination import PaginationEngine
from app.catalog.repository import ProductRepository
from app.catalog.service import ProductService
from app.infrastructure.database import Database


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Build an aiosqlite URL for a per-test database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest.fixture
async def database(database_url: str):
    """Create an initialized database and dispose it afterwards."""
    db = Database(database_url)
    await db.init()
    yield db
    await db.dispose()


@pytest.fixture
def repository(database: Database) -> ProductRepository:
    """Create repository on the test database."""
    return ProductRepository(database, timeout_seconds=10.0)


@pytest.fixture
def service(repository: ProductRepository) -> ProductService:
    """Create product service with default pagination."""
    return ProductService(
        repository,
        PaginationEngine(default_size=10, max_size=100),
        request_id="test-request",
    )
