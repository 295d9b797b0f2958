from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable machine-readable identifier (e.g. ``INSUFFICIENT_BALANCE``),
    ``details`` carries whatever the UI needs to explain the refusal.
    """

    http_status = 400
    default_code = "DOMAIN_ERROR"
    retryable = False

    def __init__(self, message: str, *, code: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    http_status = 400
    default_code = "VALIDATION_ERROR"


class AuthenticationError(DomainError):
    """Raised when the bearer credential is missing or invalid."""

    http_status = 401
    default_code = "UNAUTHENTICATED"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403
    default_code = "FORBIDDEN"


class NotFoundError(DomainError):
    http_status = 404
    default_code = "NOT_FOUND"


class StateError(DomainError):
    """Raised when the request's current state does not allow the action."""

    http_status = 409
    default_code = "INVALID_STATE"


class ConflictError(DomainError):
    """Raised when a concurrent writer won the race; safe to retry after re-fetching."""

    http_status = 409
    default_code = "CONFLICT"
    retryable = True
