"""
Connection pool helpers.
"""

import pytest

import db.connection
from db.connection import connection_scope, get_connection


def test_get_connection_requires_pool():
    with pytest.raises(RuntimeError, match="init_pool"):
        get_connection()


def test_scope_commits_writes_and_releases(fake_db):
    with connection_scope(commit=True) as conn:
        assert conn is fake_db
    assert (fake_db.commits, fake_db.rollbacks, fake_db.releases) == (1, 0, 1)


def test_scope_rolls_back_reads(fake_db):
    with connection_scope():
        pass
    assert (fake_db.commits, fake_db.rollbacks, fake_db.releases) == (0, 1, 1)


def test_scope_rolls_back_and_releases_on_error(fake_db):
    with pytest.raises(ValueError):
        with connection_scope(commit=True):
            raise ValueError("boom")
    assert (fake_db.commits, fake_db.rollbacks, fake_db.releases) == (0, 1, 1)


def test_init_pool_is_idempotent(monkeypatch):
    created = []

    class _Pool:
        def __init__(self, *args, **kwargs):
            created.append((args, kwargs))

        def closeall(self):
            created.append("closed")

    monkeypatch.setattr(db.connection.pool, "SimpleConnectionPool", _Pool)
    monkeypatch.setattr(db.connection, "_pool", None)

    db.connection.init_pool(1, 3)
    db.connection.init_pool(1, 3)
    assert len(created) == 1
    assert created[0][0][:2] == (1, 3)
    assert "connect_timeout" in created[0][1]

    db.connection.close_pool()
    assert created[-1] == "closed"
    assert db.connection._pool is None


def test_init_pool_uses_explicit_dsn(monkeypatch):
    created = []
    monkeypatch.setattr(db.connection.pool, "SimpleConnectionPool",
                        lambda *args, **kwargs: created.append(args) or object())
    monkeypatch.setattr(db.connection, "_pool", None)

    db.connection.init_pool(1, 2, dsn="postgresql://test@localhost/store")

    assert created[0][2] == "postgresql://test@localhost/store"
