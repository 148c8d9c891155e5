"""Custom exception hierarchy for LedgerQL.

All public errors inherit from LedgerQLError so callers can catch the base
class for any LedgerQL-specific failure.
"""
from __future__ import annotations


class LedgerQLError(Exception):
    """Base exception for all LedgerQL errors."""


class ConfigError(LedgerQLError):
    """Raised when the client cannot be configured (e.g. no DATABASE_URL).

    Configuration errors are raised eagerly on first use and are **not**
    folded into the result envelope.

    Args:
        message: Human-readable description.
        setting: Name of the offending setting, if any.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class InvalidFilterError(LedgerQLError):
    """Raised when a filter method receives a value its operator cannot use.

    Args:
        message: Human-readable description.
        column: The column the filter was applied to.
        operator: The operator name (e.g. ``"in"``).
    """

    def __init__(self, message: str, column: str, operator: str) -> None:
        super().__init__(message)
        self.column = column
        self.operator = operator


class QueryStateError(LedgerQLError):
    """Raised when a builder is chained into an inconsistent state.

    The typical case is setting a second mutation (``insert`` then
    ``update``) on the same builder.
    """


class CompilationError(LedgerQLError):
    """Raised when a descriptor cannot be rendered for the target backend.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class MissingSessionError(LedgerQLError):
    """Raised when an HTTP-backed query runs without an authenticated session."""

    def __init__(self, message: str = "No authenticated session; user_id is unavailable.") -> None:
        super().__init__(message)


class BackendError(LedgerQLError):
    """Wraps an error reported by the database driver or an API route.

    Only the backend's message is preserved; structured error codes are not.

    Args:
        message: The backend's error message.
        status_code: HTTP status for errors raised by the HTTP backend.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
