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


class StorageError(DomainError):
    """The record store rejected a read or write."""


def record_not_found(record_id: str) -> str:
    """Return message for missing charging record."""
    return f"Charging record {record_id} not found"


def vehicle_not_found(vehicle_id: str) -> str:
    """Return message for missing vehicle."""
    return f"Vehicle {vehicle_id} not found"


def maintenance_not_found(record_id: str) -> str:
    """Return message for missing maintenance record."""
    return f"Maintenance record {record_id} not found"


def duplicate_vehicle_name(name: str) -> str:
    """Return message for duplicate vehicle name."""
    return f"Vehicle with name '{name}' already exists"


def missing_field(field_name: str) -> str:
    """Return message for a required field left empty."""
    return f"Missing required field: {field_name}"


def negative_value(field_name: str) -> str:
    """Return message for a numeric field that must not be negative."""
    return f"{field_name} must not be negative"
