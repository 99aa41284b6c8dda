"""Failures reported back to API callers."""

from __future__ import annotations

WRONG_CREDENTIALS = "Wrong email/password"
MISSING_AUTHORIZATION = "Missing authorization headers"
EMAIL_TAKEN = "E-mail already registered"
USER_NOT_FOUND = "User not found!"
MISSING_ADMIN = "missing admin permissions"


class AccountError(Exception):
    """Base class for errors that carry the HTTP status they map to."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(AccountError):
    status_code = 409


class UnauthorizedError(AccountError):
    status_code = 401


class ForbiddenError(AccountError):
    status_code = 403


class NotFoundError(AccountError):
    status_code = 404


__all__ = [
    "AccountError",
    "ConflictError",
    "EMAIL_TAKEN",
    "ForbiddenError",
    "MISSING_ADMIN",
    "MISSING_AUTHORIZATION",
    "NotFoundError",
    "UnauthorizedError",
    "USER_NOT_FOUND",
    "WRONG_CREDENTIALS",
]
