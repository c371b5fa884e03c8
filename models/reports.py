"""
models/reports.py
-----------------
Read-only records produced by the customer aggregations.
They are recomputed on every query and have no persisted identity.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CountryTally:
    """Number of customers sharing a country label ("Unknown" when absent)."""
    country: str
    customer_count: int


@dataclass(frozen=True)
class SpenderRanking:
    """
    A customer's lifetime spend across all of their invoices.

    Attributes:
        customer_id: Customer primary key.
        customer_name: First and last name joined by a single space.
        total_spent: Exact sum of invoice totals.
    """
    customer_id: int
    customer_name: str
    total_spent: Decimal


@dataclass(frozen=True)
class GenreAffinity:
    """
    How many tracks of one genre a customer has bought.

    Attributes:
        customer_id: Customer primary key.
        customer_name: First and last name joined by a single space.
        genre_name: Genre of the purchased tracks.
        purchase_count: Number of invoice lines for tracks of this genre.
    """
    customer_id: int
    customer_name: str
    genre_name: str
    purchase_count: int
