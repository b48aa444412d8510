"""Shared fixtures: fixture tables and a fake psycopg2 connection."""

from pathlib import Path

import pytest

from repositories.fixture_repo import FixtureTables

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "db" / "json"


class FakeCursor:
    """Records executed statements and replays queued result rows."""

    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        if self.conn.error is not None:
            raise self.conn.error

    def fetchone(self):
        rows = self.conn.results.pop(0) if self.conn.results else []
        return rows[0] if rows else None

    def fetchall(self):
        return self.conn.results.pop(0) if self.conn.results else []


class FakeConnection:
    """Minimal stand-in for a pooled psycopg2 connection."""

    def __init__(self, results=None, error=None):
        self.results = list(results or [])
        self.error = error
        self.executed: list[tuple] = []
        self.committed = False
        self.rolled_back = False
        self.released = False

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


@pytest.fixture
def fake_db(monkeypatch):
    """
    Patch a repository module's pool helpers to hand out one FakeConnection.

    Usage:
        conn = fake_db("repositories.user_repo", results=[[row]])
    """
    def _install(module: str, results=None, error=None) -> FakeConnection:
        conn = FakeConnection(results, error)

        def release(c):
            c.released = True

        monkeypatch.setattr(f"{module}.get_connection", lambda: conn)
        monkeypatch.setattr(f"{module}.release_connection", release)
        return conn

    return _install


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def tables(fixtures_dir) -> FixtureTables:
    return FixtureTables(fixtures_dir)


@pytest.fixture
def property_input() -> dict:
    return {
        "owner_id": 1,
        "title": "Lakeside cabin",
        "description": "Quiet cabin by the water",
        "thumbnail_photo_url": "https://example.com/thumb.jpg",
        "cover_photo_url": "https://example.com/cover.jpg",
        "cost_per_night": 15000,
        "street": "1 Shore Road",
        "city": "Kelowna",
        "province": "British Columbia",
        "post_code": "V1Y 1A1",
        "country": "Canada",
        "parking_spaces": 2,
        "number_of_bathrooms": 1,
        "number_of_bedrooms": 2,
    }
