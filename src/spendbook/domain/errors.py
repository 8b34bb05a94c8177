"""Shared domain error messages and error types."""

from typing import Any, Optional, Sequence


GENERIC_UPSTREAM_MESSAGE = "Unexpected error from the record store."


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class UpstreamError(DomainError):
    """The record store reported a failure."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or GENERIC_UPSTREAM_MESSAGE)


class PartialBulkFailure(UpstreamError):
    """A bulk delete stopped part-way through.

    Items in ``deleted_ids`` stay deleted; nothing is rolled back.
    """

    def __init__(
        self, message: Optional[str], failed_id: str, deleted_ids: Sequence[str]
    ):
        super().__init__(message)
        self.failed_id = failed_id
        self.deleted_ids = tuple(deleted_ids)


def extract_error_message(error: Any) -> Optional[str]:
    """Pull a human-readable message out of an arbitrary error object.

    Checks ``message``, ``details``, ``hint`` and ``code`` in that order
    (attributes or mapping keys), then falls back to joining every
    non-blank string field. Returns None when nothing useful is found.
    """
    if error is None:
        return None

    if isinstance(error, str):
        return error.strip() or None

    if isinstance(error, dict):
        fields = error
    else:
        fields = getattr(error, "__dict__", {}) or {}

    for key in ("message", "details", "hint", "code"):
        candidate = fields.get(key) if isinstance(fields, dict) else None
        if candidate is None:
            candidate = getattr(error, key, None)
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()

    if isinstance(error, Exception):
        text = str(error).strip()
        if text:
            return text

    serialized = ", ".join(
        f"{key}: {value.strip()}"
        for key, value in fields.items()
        if isinstance(value, str) and value.strip()
    )
    return serialized or None


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def cashback_percent_out_of_range() -> str:
    return "Cashback percentage must be between 0 and 100."


def cashback_amount_negative() -> str:
    return "Cashback amount must be greater than or equal to 0."


def cashback_exceeds_amount() -> str:
    return "Cashback cannot exceed the transaction amount."
