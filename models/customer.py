"""
models/customer.py
------------------
Domain model for a store customer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Customer:
    """
    Represents a single customer row.

    Attributes:
        id: Database primary key (None until the store assigns one).
        first_name: Given name (required).
        last_name: Family name (required).
        email: Contact address (required).
        country: Optional country; None means "not recorded", which is
            distinct from an empty string.
        postal_code: Optional postal code.
        phone: Optional phone number.
    """
    first_name: str
    last_name: str
    email: str
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def missing_required_fields(self) -> list[str]:
        """Names of required fields that are None or blank."""
        required = {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }
        return [name for name, value in required.items() if value is None or not str(value).strip()]

    def __str__(self) -> str:
        return f"#{self.id} {self.full_name} <{self.email}>"
