"""
repositories/customer_repo.py
------------------------------
Data access layer for customers and the purchase aggregations built on
top of them (country tallies, top spenders, favourite genres).
All SQL that touches the `customer` table lives here.
"""

from decimal import Decimal
from typing import Optional

import psycopg2

from db.connection import connection_scope
from models.customer import Customer
from models.reports import CountryTally, GenreAffinity, SpenderRanking
from repositories.errors import (
    CustomerNotFoundError,
    CustomerValidationError,
    StorageError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

UNKNOWN_COUNTRY_LABEL = "Unknown"
UNKNOWN_GENRE_LABEL = "Unknown"

_CUSTOMER_COLUMNS = "customer_id, first_name, last_name, country, postal_code, phone, email"


class CustomerRepository:
    """Repository for reads, writes and aggregations over the customer table."""

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[Customer]:
        """Return every customer, ordered by id."""
        sql = f"SELECT {_CUSTOMER_COLUMNS} FROM customer ORDER BY customer_id;"
        return [self._row_to_customer(r) for r in self._query(sql)]

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """
        Fetch a single customer by primary key.

        Returns:
            A Customer, or None when no row has that id.
        """
        sql = f"SELECT {_CUSTOMER_COLUMNS} FROM customer WHERE customer_id = %s;"
        rows = self._query(sql, (customer_id,))
        return self._row_to_customer(rows[0]) if rows else None

    def search_by_name(self, fragment: str) -> list[Customer]:
        """
        Find customers whose first or last name contains ``fragment``.

        Matching is case-insensitive. LIKE wildcards in the fragment are
        matched literally, and an empty fragment matches every customer.
        """
        pattern = f"%{_escape_like(fragment or '')}%"
        sql = f"""
            SELECT {_CUSTOMER_COLUMNS} FROM customer
            WHERE first_name ILIKE %s OR last_name ILIKE %s
            ORDER BY customer_id;
        """
        return [self._row_to_customer(r) for r in self._query(sql, (pattern, pattern))]

    def get_page(self, limit: int, offset: int) -> list[Customer]:
        """
        Return up to ``limit`` customers after skipping ``offset`` rows.

        Rows are ordered by id so consecutive pages never overlap or skip.
        An offset past the end yields an empty list.
        """
        sql = f"""
            SELECT {_CUSTOMER_COLUMNS} FROM customer
            ORDER BY customer_id
            LIMIT %s OFFSET %s;
        """
        return [self._row_to_customer(r) for r in self._query(sql, (limit, offset))]

    def count(self) -> int:
        """Total number of customers."""
        return self._query("SELECT COUNT(*) FROM customer;")[0][0]

    # ── CREATE ────────────────────────────────────────────

    def add(self, customer: Customer) -> int:
        """
        Insert a new customer.

        Args:
            customer: The Customer to persist. Its ``id`` is ignored.

        Returns:
            The id assigned by the database. ``customer.id`` is set to it too.

        Raises:
            CustomerValidationError: A required field is missing.
            StorageError: The insert was rejected.
        """
        self._validate(customer)
        sql = """
            INSERT INTO customer (first_name, last_name, country, postal_code, phone, email)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING customer_id;
        """
        try:
            with connection_scope(commit=True) as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        customer.first_name, customer.last_name, customer.country,
                        customer.postal_code, customer.phone, customer.email,
                    ))
                    new_id = cur.fetchone()[0]
        except psycopg2.Error as e:
            logger.error(f"Failed to add customer {customer.full_name}: {e}")
            raise StorageError(str(e)) from e
        # Only a committed insert hands its id back to the caller.
        customer.id = new_id
        logger.info(f"Added customer #{new_id}")
        return new_id

    # ── UPDATE ────────────────────────────────────────────

    def update(self, customer: Customer) -> None:
        """
        Overwrite every mutable field of an existing customer.

        This is not a partial patch: optional fields set to None are
        written as NULL. Callers wanting field-by-field edits should read
        the customer first and merge their changes into it.

        Raises:
            CustomerValidationError: A required field is missing.
            CustomerNotFoundError: No row has ``customer.id``.
            StorageError: The update was rejected.
        """
        self._validate(customer)
        if customer.id is None:
            raise CustomerNotFoundError(None)
        sql = """
            UPDATE customer
            SET first_name = %s, last_name = %s, country = %s,
                postal_code = %s, phone = %s, email = %s
            WHERE customer_id = %s;
        """
        try:
            with connection_scope(commit=True) as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        customer.first_name, customer.last_name, customer.country,
                        customer.postal_code, customer.phone, customer.email,
                        customer.id,
                    ))
                    if cur.rowcount == 0:
                        raise CustomerNotFoundError(customer.id)
        except psycopg2.Error as e:
            logger.error(f"Failed to update customer #{customer.id}: {e}")
            raise StorageError(str(e)) from e
        logger.info(f"Updated customer #{customer.id}")

    # ── AGGREGATIONS ──────────────────────────────────────

    def count_by_country(self) -> list[CountryTally]:
        """
        Count customers per country.

        Customers without a country are grouped under "Unknown". Ordered by
        count descending, then label ascending.
        """
        sql = """
            SELECT COALESCE(country, %s) AS label, COUNT(*) AS customer_count
            FROM customer
            GROUP BY label
            ORDER BY customer_count DESC, label ASC;
        """
        rows = self._query(sql, (UNKNOWN_COUNTRY_LABEL,))
        return [CountryTally(country=r[0], customer_count=int(r[1])) for r in rows]

    def get_top_spenders(self, limit: Optional[int] = None) -> list[SpenderRanking]:
        """
        Rank customers by the sum of their invoice totals.

        Customers without invoices are left out. Ordered by total descending,
        then customer id ascending.

        Args:
            limit: Keep only the first N rankings (all when None).
        """
        sql = """
            SELECT c.customer_id,
                   c.first_name || ' ' || c.last_name AS customer_name,
                   SUM(i.total) AS total_spent
            FROM customer c
            JOIN invoice i ON i.customer_id = c.customer_id
            GROUP BY c.customer_id, c.first_name, c.last_name
            ORDER BY total_spent DESC, c.customer_id ASC
        """
        params: list = []
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        rows = self._query(sql + ";", params or None)
        return [
            SpenderRanking(customer_id=r[0], customer_name=r[1], total_spent=_to_decimal(r[2]))
            for r in rows
        ]

    def get_genre_counts(self, customer_id: int) -> list[GenreAffinity]:
        """
        Count a customer's purchased tracks per genre.

        Every invoice line is one purchase. Ordered by count descending,
        then genre name ascending. Empty when the customer bought nothing.
        """
        sql = """
            SELECT c.customer_id,
                   c.first_name || ' ' || c.last_name AS customer_name,
                   COALESCE(g.name, %s) AS genre_name,
                   COUNT(*) AS purchase_count
            FROM customer c
            JOIN invoice i ON i.customer_id = c.customer_id
            JOIN invoice_line il ON il.invoice_id = i.invoice_id
            JOIN track t ON t.track_id = il.track_id
            JOIN genre g ON g.genre_id = t.genre_id
            WHERE c.customer_id = %s
            GROUP BY c.customer_id, c.first_name, c.last_name, genre_name
            ORDER BY purchase_count DESC, genre_name ASC;
        """
        rows = self._query(sql, (UNKNOWN_GENRE_LABEL, customer_id))
        return [
            GenreAffinity(
                customer_id=r[0], customer_name=r[1],
                genre_name=r[2], purchase_count=int(r[3]),
            )
            for r in rows
        ]

    def get_most_popular_genre(self, customer_id: int) -> list[GenreAffinity]:
        """
        The genre(s) a customer has bought most often.

        When several genres share the highest count, all of them are
        returned, sorted by name. Empty when the customer has no purchases
        or does not exist.
        """
        return select_top_genres(self.get_genre_counts(customer_id))

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _query(sql: str, params=None) -> list[tuple]:
        """Run a read-only statement and return all rows."""
        try:
            with connection_scope() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    return cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Customer query failed: {e}")
            raise StorageError(str(e)) from e

    @staticmethod
    def _validate(customer: Customer) -> None:
        missing = customer.missing_required_fields()
        if missing:
            raise CustomerValidationError(missing)

    @staticmethod
    def _row_to_customer(row: tuple) -> Customer:
        """Convert a database row tuple to a Customer domain object."""
        return Customer(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            country=row[3],
            postal_code=row[4],
            phone=row[5],
            email=row[6],
        )


def select_top_genres(affinities: list[GenreAffinity]) -> list[GenreAffinity]:
    """
    Keep every affinity whose purchase count equals the maximum.

    Ties are all kept; a single row is never picked arbitrarily among them.
    """
    if not affinities:
        return []
    top = max(a.purchase_count for a in affinities)
    return sorted(
        (a for a in affinities if a.purchase_count == top),
        key=lambda a: a.genre_name,
    )


def _escape_like(text: str) -> str:
    """Escape LIKE metacharacters so they match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
