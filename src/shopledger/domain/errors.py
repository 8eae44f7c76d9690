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


def entry_not_found(entry_id: str) -> str:
    """Return message for missing entry."""
    return f"Entry '{entry_id}' not found"


def product_not_found(product_id: str) -> str:
    """Return message for missing stock item."""
    return f"Product '{product_id}' not found"


def duplicate_entry_id(entry_id: str) -> str:
    """Return message for an entry ID that is already recorded."""
    return f"Entry with id '{entry_id}' already exists"


def duplicate_product_name(name: str) -> str:
    """Return message for a stock item name that is already used."""
    return f"Product with name '{name}' already exists"


def invalid_field(owner: str, field_name: str, reason: str) -> str:
    """Return message for a field that failed validation."""
    return f"{owner}: '{field_name}' {reason}"


def unsupported_export_version(version: object) -> str:
    """Return message for an export file with an unknown version."""
    return f"Unsupported export file version (got: {version!r})"


def unsupported_schema_version(version: object, current: int) -> str:
    """Return message for a stored document newer than this release."""
    return f"Unsupported document schema version {version!r} (current: {current})"


def save_failed() -> str:
    """Return message when the document could not be persisted."""
    return "Could not save business data"
