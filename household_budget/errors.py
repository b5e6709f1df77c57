# household_budget/errors.py
"""
Error taxonomy shared by the session manager, the budget store and the
remote store.

- ValidationError: a mutation was missing required input; nothing was sent.
- AuthError: bad credentials, missing or expired session.
- RemoteError: the backing store failed (or had nothing to act on).
"""

from __future__ import annotations

from enum import Enum


class BudgetError(Exception):
    """Base class for every error this package raises on purpose."""


class ValidationError(BudgetError):
    def __init__(self, message: str, code: str = "operation_failed") -> None:
        self.code = code  # UI string key for the user-facing notice
        super().__init__(message)


class AuthErrorKind(str, Enum):
    invalid_credentials = "invalid_credentials"
    not_authenticated = "not_authenticated"
    session_expired = "session_expired"
    email_taken = "email_taken"
    unknown = "unknown"


class AuthError(BudgetError):
    def __init__(self, kind: AuthErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value)


class RemoteError(BudgetError):
    pass


class NotReadyError(BudgetError):
    """The budget store has no loaded snapshot (signed out or still loading)."""


__all__ = [
    "BudgetError",
    "ValidationError",
    "AuthErrorKind",
    "AuthError",
    "RemoteError",
    "NotReadyError",
]
