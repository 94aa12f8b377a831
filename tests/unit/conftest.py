"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from src.main import app
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient.

    Services default to the db_client module, so code under test that does
    not receive an explicit store goes through the in-memory one.
    """
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.db_client.put_record", in_memory_db.put_record)
    monkeypatch.setattr("src.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("src.core.db_client.list_by_index", in_memory_db.list_by_index)

    return in_memory_db


@pytest.fixture
def march_now():
    """A fixed spring moment, outside both seasonal windows."""
    return datetime(2024, 3, 15, 10, 0, tzinfo=UTC)


@pytest.fixture
def fixed_clock(march_now):
    """A clock that always returns the spring moment."""
    return lambda: march_now


@pytest.fixture
def client(patched_db):
    """TestClient over the app with the store patched in memory.

    Used without a context manager so the lifespan (logfire, SQLite) does not run.
    """
    return TestClient(app)
