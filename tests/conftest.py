"""
Test configuration.

Puts the project root on sys.path and provides an in-process stand-in for
a pooled psycopg2 connection, so repositories can be exercised without a
running PostgreSQL server.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class FakeCursor:
    """Serves the next scripted result on every execute()."""

    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self._rows: list[tuple] = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))
        result = self.conn.results.pop(0) if self.conn.results else {}
        if result.get("error") is not None:
            raise result["error"]
        self._rows = list(result.get("rows", []))
        self.rowcount = result.get("rowcount", len(self._rows))

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """Records statements, commits, rollbacks and pool releases."""

    def __init__(self):
        self.results: list[dict] = []
        self.executed: list[tuple[str, object]] = []
        self.commits = 0
        self.rollbacks = 0
        self.releases = 0
        self.commit_error: Exception | None = None

    def script(self, rows=None, rowcount=None, error=None) -> "FakeConnection":
        result = {"rows": rows or []}
        if rowcount is not None:
            result["rowcount"] = rowcount
        if error is not None:
            result["error"] = error
        self.results.append(result)
        return self

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    @property
    def last_sql(self) -> str:
        return self.executed[-1][0]

    @property
    def last_params(self):
        return self.executed[-1][1]


@pytest.fixture
def fake_db(monkeypatch):
    """Route db.connection's pool calls to a single FakeConnection."""
    import db.connection

    conn = FakeConnection()

    def _release(released):
        assert released is conn
        conn.releases += 1

    monkeypatch.setattr(db.connection, "get_connection", lambda: conn)
    monkeypatch.setattr(db.connection, "release_connection", _release)
    return conn


def customer_row(customer_id, first="Ann", last="Lee", country=None,
                 postal_code=None, phone=None, email=None):
    """A customer row in the column order the repository selects."""
    return (
        customer_id, first, last, country, postal_code, phone,
        email or f"{first.lower()}@example.com",
    )
