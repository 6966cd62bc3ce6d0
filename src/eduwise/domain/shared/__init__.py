"""Shared domain building blocks (exceptions, time helpers)."""

from eduwise.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleViolation,
    ConflictError,
    DependencyFailureError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from eduwise.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BusinessRuleViolation",
    "ConflictError",
    "DependencyFailureError",
    "DomainException",
    "EntityNotFoundError",
    "ErrorCode",
    "ValidationError",
    "ensure_tz_aware",
    "utc_now",
]
