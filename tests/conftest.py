"""
Shared fixtures for the registration form API tests.

Store-backed tests run against a real SqlStore on in-memory SQLite, so the
full validate -> write -> read pipeline is exercised without Google Sheets.
"""

from __future__ import annotations

from typing import Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from config import Settings, reset_settings
from sql_store import SqlStore

APP_ENV_VARS = (
    "GOOGLE_SPREADSHEET_ID",
    "GOOGLE_SERVICE_ACCOUNT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_CREDENTIALS",
    "STORAGE_BACKEND",
    "DATABASE_URL",
    "SHEET_TITLE",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip app configuration from the environment and drop cached settings."""
    for name in APP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def valid_form() -> dict:
    return {"name": "A", "email": "a@b.co", "phone": "555", "message": "hi"}


@pytest.fixture
def sql_store() -> SqlStore:
    """Fresh in-memory database with no submissions table yet."""
    return SqlStore.from_url("sqlite://")


@pytest.fixture
def sql_settings() -> Settings:
    return Settings(STORAGE_BACKEND="sql", DATABASE_URL="sqlite://", _env_file=None)


@pytest.fixture
def client(sql_settings: Settings, sql_store: SqlStore) -> Iterator[TestClient]:
    from main import create_app

    with TestClient(create_app(settings=sql_settings, store=sql_store)) as test_client:
        yield test_client


@pytest.fixture
def untouchable_store_factory() -> MagicMock:
    """Store factory that fails the test if a route tries to build a store."""
    return MagicMock(side_effect=AssertionError("store must not be used"))
