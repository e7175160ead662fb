"""
Application exception hierarchy.

Every error carries an HTTP status, a stable machine-readable ``code`` and a
user-facing ``suggestion``; the API layer turns them into a JSON envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class MaalaError(Exception):
    """Base exception for the application."""

    status_code = 500
    code = "SERVER_ERROR"
    suggestion = "Please try again later"

    def __init__(
        self,
        message: str,
        *,
        suggestion: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        if suggestion is not None:
            self.suggestion = suggestion
        self.details = details
        super().__init__(message)


class ValidationError(MaalaError):
    """Bad input shape or range."""

    status_code = 400
    code = "VALIDATION_ERROR"
    suggestion = "Please check your input and try again"


class NotFoundError(MaalaError):
    """Missing seller, subscription or user."""

    status_code = 404
    code = "NOT_FOUND"
    suggestion = "Please check the identifier and try again"


class ConflictError(MaalaError):
    status_code = 409
    code = "CONFLICT"
    suggestion = "The resource already exists"


class SubscriptionRequiredError(MaalaError):
    status_code = 403
    code = "SUBSCRIPTION_REQUIRED"
    suggestion = "Subscribe to continue"


class ServerError(MaalaError):
    """Unexpected or storage failure."""
