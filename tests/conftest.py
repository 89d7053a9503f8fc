"""Test configuration and fixtures."""

import os
from typing import Generator

import pytest
import pytest_asyncio

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set environment variables BEFORE importing the app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from fastapi.testclient import TestClient

from blackouts import BlackoutManager
from catalog import ResourceCatalog
from config import Settings
from database import Store
from main import create_app
from reservations import ReservationManager


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL, log_level="WARNING", log_json=False)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client backed by a fresh in-memory database."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def projector(client: TestClient) -> dict:
    response = client.post(
        "/recursos",
        json={"name": "Projector A", "description": "Ceiling-mounted projector"},
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def store():
    store = Store(TEST_DATABASE_URL)
    await store.init()
    try:
        yield store
    finally:
        await store.dispose()


@pytest_asyncio.fixture
async def store_without_tables():
    """A reachable store whose schema was never created, so every statement fails."""
    store = Store(TEST_DATABASE_URL)
    await store.init(create_tables=False)
    try:
        yield store
    finally:
        await store.dispose()


@pytest.fixture
def catalog(store: Store) -> ResourceCatalog:
    return ResourceCatalog(store)


@pytest.fixture
def reservations(store: Store) -> ReservationManager:
    return ReservationManager(store)


@pytest.fixture
def blackouts(store: Store) -> BlackoutManager:
    return BlackoutManager(store)
