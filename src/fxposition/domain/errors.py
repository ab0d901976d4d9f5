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


class DuplicateError(DomainError):
    """Unique-key violation on create."""


class StateConflictError(DomainError):
    """Illegal workflow transition or concurrent modification."""


class PermissionDeniedError(DomainError):
    """Actor lacks the privilege required for the operation."""


class DependencyMissingError(DomainError):
    """Required catalog data is absent (a configuration fault)."""


class CalculationError(DomainError):
    """A computation could not produce a result, e.g. a zero denominator."""


def not_found(kind: str, key) -> str:
    """Return message for a missing entity."""
    return f"{kind} {key} not found"


def duplicate_balance_entry(balance_date, currency_code: str, item_code: str) -> str:
    """Return message for an existing (date, currency, item) balance."""
    return (
        f"Balance already exists for {balance_date.isoformat()}, "
        f"currency {currency_code}, item {item_code}"
    )


def illegal_transition(subject: str, current: str, target: str) -> str:
    """Return message for a transition the workflow does not allow."""
    return f"Cannot move {subject} from '{current}' to '{target}'"


def missing_catalog_item(code: str) -> str:
    """Return message when a required balance item is not configured."""
    return (
        f"Balance item '{code}' is not configured. "
        "Run 'fxpos item init' to seed the default catalog."
    )
