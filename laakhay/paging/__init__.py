"""Laakhay Paging - Query-driven paging and chunk loading for reactive clients."""

from .core import (
    DEFAULT_PAGE_SIZE,
    ConfigurationError,
    InvalidQueryError,
    PagingConfig,
    PagingError,
    is_fatal,
)
from .models import (
    ChunkingState,
    FetchOutcome,
    PageQuery,
    PageRef,
    PageResult,
    PagingState,
)
from .runtime import Chunking, Observable, ObservableList, Paging

__version__ = "0.1.0"

__all__ = [
    # Engines
    "Paging",
    "Chunking",
    # Models
    "PageRef",
    "PageQuery",
    "PageResult",
    "PagingState",
    "ChunkingState",
    "FetchOutcome",
    # Observables
    "Observable",
    "ObservableList",
    # Configuration
    "DEFAULT_PAGE_SIZE",
    "PagingConfig",
    # Exceptions
    "PagingError",
    "InvalidQueryError",
    "ConfigurationError",
    "is_fatal",
]
