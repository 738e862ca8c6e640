"""Page reference, query, and result models."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import DEFAULT_PAGE_SIZE

T = TypeVar("T")
S = TypeVar("S")


class PageRef(BaseModel):
    """Pointer to a page, by cursor and/or offset.

    Both fields absent denotes the first page. Cursor semantics are defined
    by the data source; offset counts items from the start of the sequence.
    """

    cursor: str | None = None
    offset: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_first(self) -> bool:
        """True if this reference points at the first page."""
        return self.cursor is None and self.offset is None


class PageQuery(BaseModel, Generic[S]):
    """Fetch intent: search value, page size, and which page to fetch.

    Equality is structural and is what engines compare to decide whether a
    fetched result still belongs to the current query.
    """

    search: S | None = None
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    ref: PageRef = Field(default_factory=PageRef)

    model_config = ConfigDict(frozen=True)


class PageResult(BaseModel, Generic[T]):
    """Outcome of one fetch.

    ``next_item_count`` is the number of items in the next page, or None if
    the source could not report it.
    """

    items: list[T] = Field(default_factory=list)
    next_item_count: int | None = Field(default=None, ge=0)
    next_ref: PageRef = Field(default_factory=PageRef)

    model_config = ConfigDict(frozen=True)
