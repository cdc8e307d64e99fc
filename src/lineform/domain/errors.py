"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class RateLookupError(DomainError):
    """A currency rate could not be provided by a rate source."""


def group_not_found(group_id: str) -> str:
    """Return message for missing group."""
    return f"Group '{group_id}' not found"


def entry_not_found(entry_id: str) -> str:
    """Return message for missing entry."""
    return f"Entry '{entry_id}' not found"


def duplicate_group(group_id: str) -> str:
    """Return message for a group ID that is already in the store."""
    return f"Group '{group_id}' already exists"


def unknown_entry_field(name: str) -> str:
    """Return message for an entry field that cannot be edited."""
    return f"Unknown entry field '{name}'"


def invalid_amount_mode(value: str) -> str:
    """Return message for a tax/discount mode outside percent/amount."""
    return f"Invalid mode '{value}': expected 'percent' or 'amount'"


def profile_not_found(name: str, available: list[str]) -> str:
    """Return message for an unknown engine profile."""
    return f"Profile '{name}' not found. Available profiles: {', '.join(available)}"


def rate_not_found(currency: str) -> str:
    """Return message for a currency with no stored rate."""
    return f"No exchange rate found for {currency}"


def rate_not_found_by_id(rate_id: int) -> str:
    """Return message for a missing rate record."""
    return f"Exchange rate {rate_id} not found"


# Entry validation messages, shown next to the offending entry.
TARGET_REQUIRED = "Target is required"
QUANTITY_NOT_POSITIVE = "Quantity must be greater than 0"
UNIT_PRICE_NOT_POSITIVE = "Unit price must be greater than 0"


def invalid_number(field_label: str, value: str) -> str:
    """Return message for a numeric entry field that does not parse."""
    return f"{field_label} '{value}' is not a valid number"
