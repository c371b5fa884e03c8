"""
repositories/errors.py
----------------------
Errors raised by the data access layer.

Driver exceptions never leak out of a repository: they are re-raised as
StorageError with the original attached as ``__cause__``.
"""


class RepositoryError(Exception):
    """Base class for data access errors."""


class CustomerValidationError(RepositoryError, ValueError):
    """A customer is missing one or more required fields. Nothing was written."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing required customer fields: {', '.join(self.missing_fields)}")


class CustomerNotFoundError(RepositoryError, LookupError):
    """No customer row has the given id."""

    def __init__(self, customer_id: int | None):
        self.customer_id = customer_id
        super().__init__(f"Customer #{customer_id} not found")


class StorageError(RepositoryError, RuntimeError):
    """The database rejected the operation or could not be reached."""
