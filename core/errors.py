"""
Caller-facing error taxonomy.

Every error raised by the services derives from ``TaskManagerError`` and
carries the HTTP status the API layer answers with.  Anything that is not a
``TaskManagerError`` (store outage, hashing failure, …) is an unclassified
system error and is left to propagate.
"""

from __future__ import annotations


class TaskManagerError(Exception):
    """Base exception for service errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskManagerError):
    status_code = 400


class UnauthorizedError(TaskManagerError):
    status_code = 401


class InvalidTokenError(UnauthorizedError):
    """Token signature mismatch, malformed token, or expiry."""


class ForbiddenError(TaskManagerError):
    status_code = 403


class NotFoundError(TaskManagerError):
    status_code = 404


class ConflictError(TaskManagerError):
    status_code = 409
