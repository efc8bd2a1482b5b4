"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a referenced equipment, reservation or user does not exist."""


class ConflictError(DomainError):
    """Raised when a proposed interval overlaps an active reservation."""


class ValidationError(DomainError):
    """Raised when input validation fails at the domain/service layer."""


class ForbiddenError(DomainError):
    """Raised when the caller does not own the reservation it tries to change."""


class AuthenticationError(DomainError):
    """Raised when credentials or a bearer token cannot be accepted."""


class InfrastructureError(DomainError):
    """Raised when infrastructure (DB or external service) is unavailable."""
