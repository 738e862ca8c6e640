"""Engine state snapshots.

Snapshots are replaced wholesale on every transition, never mutated.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .page import PageQuery, PageRef, PageResult

T = TypeVar("T")
S = TypeVar("S")


class PagingState(BaseModel, Generic[T, S]):
    """Paging snapshot.

    Attributes:
        query: The page currently targeted by the user
        result: The result of the last committed fetch
        is_stale: True if ``result`` was not produced by fetching ``query``
    """

    query: PageQuery = Field(default_factory=PageQuery)
    result: PageResult = Field(default_factory=PageResult)
    is_stale: bool = False

    model_config = ConfigDict(frozen=True)


class ChunkingState(BaseModel, Generic[S]):
    """Chunking snapshot.

    The accumulated items live outside the snapshot, in the engine's
    append-only item list.

    Attributes:
        search: Search value the items belong to
        next_item_count: Items in the next chunk (None if unknown)
        next_ref: Reference to the next chunk
        is_stale: True if the items do not belong to ``search`` yet
    """

    search: S | None = None
    next_item_count: int | None = Field(default=None, ge=0)
    next_ref: PageRef = Field(default_factory=PageRef)
    is_stale: bool = False

    model_config = ConfigDict(frozen=True)
