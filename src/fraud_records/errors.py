"""Exception taxonomy for the fraud record service.

Validation and not-found failures are turned into ``{"success": False}``
responses at the tool dispatch boundary. Generator failures never leave the
insight service; they are replaced by fallback text there.
"""

from __future__ import annotations


class FraudRecordsError(Exception):
    """Base class for all service errors."""


class ValidationError(FraudRecordsError):
    """A fraud report field is missing or invalid."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(FraudRecordsError):
    """A targeted lookup or update referenced an unknown record id."""


class StorageError(FraudRecordsError):
    """The underlying record store failed."""


class DuplicateTransactionError(StorageError):
    """An insert lost the race for an already stored transaction id."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction already recorded: {transaction_id}")
        self.transaction_id = transaction_id


class GeneratorUnavailable(FraudRecordsError):
    """The external text generation call failed."""
