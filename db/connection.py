"""
db/connection.py
----------------
Pooled PostgreSQL access for the customer store.
One process-wide psycopg2 SimpleConnectionPool is opened at start-up;
every repository call borrows a connection through ``connection_scope``
and hands it back when it is done.
"""

from contextlib import contextmanager
from typing import Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_CONNECT_TIMEOUT, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(
    min_conn: int = DB_POOL_MIN,
    max_conn: int = DB_POOL_MAX,
    dsn: Optional[str] = None,
) -> None:
    """
    Open the pool the customer repository draws from. Calling it again
    while a pool is open does nothing.

    Args:
        min_conn: Connections opened up front (DB_POOL_MIN).
        max_conn: Upper bound on concurrent borrowers (DB_POOL_MAX).
        dsn: Connection string; defaults to DATABASE_URL from the environment.

    Raises:
        psycopg2.OperationalError: The store database is unreachable or
            rejects the credentials within DB_CONNECT_TIMEOUT seconds.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(
            min_conn, max_conn, dsn or DATABASE_URL, connect_timeout=DB_CONNECT_TIMEOUT
        )
        logger.info(f"Customer store pool opened ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Cannot reach the customer store database: {e}")
        raise


def get_connection():
    """
    Borrow a raw connection. Prefer ``connection_scope``, which also
    ends the transaction and returns the connection.

    Raises:
        RuntimeError: ``init_pool()`` has not run yet.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Hand a borrowed connection back; a no-op once the pool is closed."""
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def connection_scope(commit: bool = False):
    """
    Borrow a pooled connection for the duration of a ``with`` block.

    On a clean exit the transaction is committed when ``commit`` is set and
    rolled back otherwise, so read-only work never leaves the connection
    idle in a transaction. Any exception rolls back and propagates. The
    connection always goes back to the pool.

    Usage:
        with connection_scope(commit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(...)
    """
    conn = get_connection()
    try:
        yield conn
        if commit:
            conn.commit()
        else:
            conn.rollback()
    except Exception:
        conn.rollback()
        raise
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close every pooled connection at shutdown so the console exits cleanly."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Customer store pool closed.")
