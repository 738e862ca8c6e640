"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any


class PagingError(Exception):
    """Base exception for all library errors."""

    pass


class InvalidQueryError(PagingError):
    """A query edit produced something that is not a PageQuery.

    Raised synchronously from query edits so the offending transform is
    reported at the call site instead of being recorded as a fetch failure.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class ConfigurationError(PagingError):
    """Invalid engine configuration."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
