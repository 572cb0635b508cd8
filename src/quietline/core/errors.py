"""Typed failures raised inside the service layer.

Services raise these while validating input and checking state. The
operation boundary in :mod:`quietline.services.base` turns them into
``ServiceResponse`` envelopes, so callers never see them escape.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(RuntimeError):
    """Base exception for all service-layer failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Malformed id, self-targeting, malformed handle or payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    """Credentials did not match any account."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ServiceError):
    """The relationship state does not permit the action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    """Missing account, or relationship not in the expected state."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Duplicate request or duplicate handle."""

    status_code = status.HTTP_409_CONFLICT


class TransientStorageError(ServiceError):
    """Backing store failed; the caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


__all__ = [
    "ServiceError",
    "InvalidInputError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "TransientStorageError",
]
