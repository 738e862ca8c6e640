"""Data models for paging state.

Architecture:
    This module exports the Pydantic v2 models shared by both engines.
    All models are immutable (frozen=True): engines publish a new snapshot on
    every transition instead of mutating the current one.

Design Decisions:
    - Pydantic v2: Validation, structural equality, and serialization
    - Frozen models: Observers can hold a snapshot without it changing under them
    - Structural equality: PageQuery equality is the reconciliation key

Model Categories:
    - Paging vocabulary: PageRef, PageQuery, PageResult
    - Snapshots: PagingState, ChunkingState
    - Events: FetchOutcome
"""

from .events import FetchOutcome
from .page import PageQuery, PageRef, PageResult
from .state import ChunkingState, PagingState

__all__ = [
    "ChunkingState",
    "FetchOutcome",
    "PageQuery",
    "PageRef",
    "PageResult",
    "PagingState",
]
