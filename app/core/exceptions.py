"""
Typed errors raised by the record store, lifecycle orchestrator and query layer.

Every failure the core can produce maps to exactly one of these classes.
Each carries the HTTP status the API layer renders it with, so endpoints
can let them propagate to the exception handler registered in main.py.
"""

from fastapi import status


class RegistryError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RegistryError):
    """Entity is absent, or filtered out by the caller's scope."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(RegistryError):
    """Authorization policy denied the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class RecordValidationError(RegistryError):
    """Malformed or missing required input."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InvalidStateError(RegistryError):
    """Operation is undefined for the entity's current state."""

    status_code = status.HTTP_409_CONFLICT


class ConflictError(RegistryError):
    """Concurrent transition or uniqueness collision on the same entity."""

    status_code = status.HTTP_409_CONFLICT


class StoreTimeoutError(RegistryError):
    """A store call exceeded its time bound."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT


class StoreError(RegistryError):
    """Unclassified persistence failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
