"""Core components."""

from .config import DEFAULT_PAGE_SIZE, PagingConfig
from .exceptions import ConfigurationError, InvalidQueryError, PagingError
from .fatal import FATAL_EXCEPTIONS, is_fatal, raise_if_fatal

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PagingConfig",
    "PagingError",
    "InvalidQueryError",
    "ConfigurationError",
    "FATAL_EXCEPTIONS",
    "is_fatal",
    "raise_if_fatal",
]
