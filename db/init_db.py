"""
db/init_db.py
-------------
Creates the music-store tables if they do not already exist.
Run this module directly to bootstrap a fresh database:
    python -m db.init_db

Only the columns the customer repository reads or writes are declared;
an existing Chinook-style database with extra columns works unchanged.
"""

from db.connection import connection_scope
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Customers: first/last name and email are required, the rest optional
CREATE TABLE IF NOT EXISTS customer (
    customer_id     SERIAL PRIMARY KEY,
    first_name      VARCHAR(40) NOT NULL,
    last_name       VARCHAR(20) NOT NULL,
    country         VARCHAR(40),
    postal_code     VARCHAR(10),
    phone           VARCHAR(24),
    email           VARCHAR(60) NOT NULL
);

-- Invoices: one purchase event per customer, total kept as exact decimal
CREATE TABLE IF NOT EXISTS invoice (
    invoice_id      SERIAL PRIMARY KEY,
    customer_id     INT NOT NULL REFERENCES customer(customer_id),
    invoice_date    TIMESTAMP NOT NULL DEFAULT NOW(),
    total           NUMERIC(10,2) NOT NULL
);

-- Genres
CREATE TABLE IF NOT EXISTS genre (
    genre_id        SERIAL PRIMARY KEY,
    name            VARCHAR(120)
);

-- Tracks: genre is optional
CREATE TABLE IF NOT EXISTS track (
    track_id        SERIAL PRIMARY KEY,
    name            VARCHAR(200) NOT NULL,
    genre_id        INT REFERENCES genre(genre_id),
    unit_price      NUMERIC(10,2) NOT NULL DEFAULT 0.99
);

-- Invoice lines: one row per purchased track
CREATE TABLE IF NOT EXISTS invoice_line (
    invoice_line_id SERIAL PRIMARY KEY,
    invoice_id      INT NOT NULL REFERENCES invoice(invoice_id),
    track_id        INT NOT NULL REFERENCES track(track_id),
    unit_price      NUMERIC(10,2) NOT NULL,
    quantity        INT NOT NULL DEFAULT 1
);

-- Indexes for the joins used by the aggregations
CREATE INDEX IF NOT EXISTS idx_invoice_customer ON invoice(customer_id);
CREATE INDEX IF NOT EXISTS idx_invoice_line_invoice ON invoice_line(invoice_id);
CREATE INDEX IF NOT EXISTS idx_track_genre ON track(genre_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with connection_scope(commit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
