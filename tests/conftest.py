# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from types import SimpleNamespace
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from dependencies.auth import CurrentUser, get_current_user


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(app):
    """Return a function that makes every request run as the given user."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user():
    return CurrentUser(
        id="admin-user-id",
        email="admin@example.com",
        role="platform_admin",
    )


@pytest.fixture
def manager_user():
    return CurrentUser(
        id="manager-user-id",
        email="manager@example.com",
        role="management",
        condo_id="condo-1",
    )


@pytest.fixture
def security_user():
    return CurrentUser(
        id="security-user-id",
        email="guard@example.com",
        role="security",
        condo_id="condo-1",
    )


@pytest.fixture
def resident_user():
    return CurrentUser(
        id="resident-user-id",
        email="resident@example.com",
        role="resident",
        condo_id="condo-1",
    )


class FakeUnitsStore:
    """
    In-memory stand-in for the Supabase units upsert path.

    Mirrors PostgREST `ignore-duplicates`: conflicting rows are skipped and
    only newly inserted rows come back in `data`.
    """

    def __init__(self, fail_on_call=None, error_message="connection reset"):
        self.rows = {}
        self.calls = []
        self.fail_on_call = fail_on_call
        self.error_message = error_message
        self._table = None
        self._pending = None

    def table(self, name):
        self._table = name
        return self

    def upsert(self, rows, on_conflict="", ignore_duplicates=False, returning="representation"):
        self.calls.append({
            "table": self._table,
            "rows": rows,
            "on_conflict": on_conflict,
            "ignore_duplicates": ignore_duplicates,
        })
        self._pending = rows
        return self

    def execute(self):
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise Exception(self.error_message)

        inserted = []
        for row in self._pending:
            key = (row["condo_id"], row["unit_number"])
            if key in self.rows:
                continue
            self.rows[key] = row
            inserted.append(row)
        return SimpleNamespace(data=inserted)


@pytest.fixture
def units_store():
    return FakeUnitsStore()


@pytest.fixture
def make_units_store():
    """Factory for stores that fail on a given upsert call."""
    return FakeUnitsStore
