"""
services/customer_service.py
----------------------------
Business logic for the customer console.
Turns user input into repository calls and repository results into
printable text. Partial edits are merged here, never in the repository.
"""

import math
from dataclasses import replace
from typing import Optional

from models.customer import Customer
from repositories.customer_repo import CustomerRepository
from repositories.errors import CustomerNotFoundError, CustomerValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("first_name", "last_name", "email", "country", "postal_code", "phone")

_HEADER = (
    f"{'ID':<3} | {'First Name':<15} | {'Last Name':<15} | {'Country':<15} | "
    f"{'Postal Code':<13} | {'Phone':<19} | Email"
)
_RULE = "-" * 100


class CustomerService:
    """
    Handles all business logic behind the customer menu.

    Every public method returns a ready-to-print string, except
    ``get_customer`` which hands the raw record to the update flow.
    """

    def __init__(self, repo: Optional[CustomerRepository] = None):
        self.repo = repo or CustomerRepository()

    # ── Lookups ───────────────────────────────────────────

    def list_all(self) -> str:
        customers = self.repo.get_all()
        if not customers:
            return "No customers stored yet."
        return "\n".join([
            "All Customers:",
            format_customer_table(customers),
            f"\nTotal customers: {len(customers)}",
        ])

    def find_by_id(self, customer_id: int) -> str:
        customer = self.repo.get_by_id(customer_id)
        if customer is None:
            return "Customer not found."
        return "Customer Details:\n" + format_customer_table([customer])

    def find_by_name(self, fragment: str) -> str:
        customers = self.repo.search_by_name(fragment)
        if not customers:
            return "No customers found with that name."
        return "Matching Customers:\n" + format_customer_table(customers)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self.repo.get_by_id(customer_id)

    def page(self, page_number: int, page_size: int) -> str:
        """
        Render one page of customers.

        Args:
            page_number: 1-based page number (must be positive).
            page_size: Customers per page (must be positive).
        """
        customers = self.repo.get_page(page_size, page_offset(page_number, page_size))
        total_pages = page_count(self.repo.count(), page_size)
        if not customers:
            return f"Page {page_number} is empty ({total_pages} page(s) available)."
        return "\n".join([
            f"Customers - page {page_number} of {total_pages}:",
            format_customer_table(customers),
        ])

    # ── Writes ────────────────────────────────────────────

    def add_customer(
        self,
        first_name: str,
        last_name: str,
        email: str,
        country: Optional[str] = None,
        postal_code: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> str:
        """Create a customer from raw input. Blank optional values are stored as NULL."""
        customer = Customer(
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
            email=(email or "").strip(),
            country=_optional(country),
            postal_code=_optional(postal_code),
            phone=_optional(phone),
        )
        try:
            new_id = self.repo.add(customer)
        except CustomerValidationError as e:
            return f"Cannot add customer: {e}"
        return f"New customer added with ID: {new_id}"

    def update_customer(self, customer_id: int, changes: dict[str, Optional[str]]) -> str:
        """
        Apply a field-by-field edit.

        The stored customer is read, ``changes`` are merged into it (blank
        values keep the current value) and the full record is written back.
        """
        existing = self.repo.get_by_id(customer_id)
        if existing is None:
            return "Customer not found."
        merged = merge_changes(existing, changes)
        try:
            self.repo.update(merged)
        except CustomerNotFoundError:
            return "Customer not found."
        except CustomerValidationError as e:
            return f"Cannot update customer: {e}"
        return "Customer updated successfully."

    # ── Reports ───────────────────────────────────────────

    def country_summary(self) -> str:
        tallies = self.repo.count_by_country()
        if not tallies:
            return "No customers stored yet."
        lines = ["Customers by Country:", f"{'Country':<20} | Customers", "-" * 33]
        lines += [f"{t.country:<20} | {t.customer_count}" for t in tallies]
        return "\n".join(lines)

    def top_spenders_summary(self, limit: Optional[int] = None) -> str:
        rankings = self.repo.get_top_spenders(limit)
        if not rankings:
            return "No invoices recorded yet."
        lines = ["Top Spenders:", f"{'ID':<4} | {'Customer':<30} | Total Spent", "-" * 52]
        lines += [
            f"{r.customer_id:<4} | {r.customer_name:<30} | {r.total_spent:.2f}"
            for r in rankings
        ]
        return "\n".join(lines)

    def favourite_genre_summary(self, customer_id: int) -> str:
        genres = self.repo.get_most_popular_genre(customer_id)
        if not genres:
            return f"No purchases found for customer #{customer_id}."
        name = genres[0].customer_name
        label = "Most popular genre" if len(genres) == 1 else "Most popular genres (tied)"
        lines = [f"{label} for {name}:"]
        lines += [f"  {g.genre_name}: {g.purchase_count} track(s)" for g in genres]
        return "\n".join(lines)


# ── Helpers ───────────────────────────────────────────────

def format_customer_table(customers: list[Customer]) -> str:
    """Fixed-width table of customers; absent optional values show as N/A."""
    rows = [_HEADER, _RULE]
    for c in customers:
        rows.append(
            f"{c.id!s:<3} | {c.first_name:<15} | {c.last_name:<15} | "
            f"{_na(c.country):<15} | {_na(c.postal_code):<13} | {_na(c.phone):<19} | {c.email}"
        )
    return "\n".join(rows)


def merge_changes(existing: Customer, changes: dict[str, Optional[str]]) -> Customer:
    """
    Return a copy of ``existing`` with the non-blank ``changes`` applied.

    Raises:
        KeyError: A key in ``changes`` is not an editable field.
    """
    updates = {}
    for field_name, value in changes.items():
        if field_name not in EDITABLE_FIELDS:
            raise KeyError(field_name)
        if value is not None and value.strip():
            updates[field_name] = value.strip()
    return replace(existing, **updates)


def page_offset(page_number: int, page_size: int) -> int:
    """Rows to skip for a 1-based page number."""
    return (page_number - 1) * page_size


def page_count(total_rows: int, page_size: int) -> int:
    return max(1, math.ceil(total_rows / page_size))


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _na(value: Optional[str]) -> str:
    return "N/A" if value is None else value
