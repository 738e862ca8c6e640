"""Append-oriented chunk loading engine.

Chunking grows a list of items chunk by chunk (infinite scroll). Unlike
Paging it never runs two fetches at once: ``fetch`` and ``fetch_more`` hold a
single non-reentrant ``asyncio.Lock`` for their whole body, fetcher call
included, so back-to-back calls queue up and run one after the other.

Architecture:
    - fetch: start over for a search value (publishes stale state first)
    - fetch_more: load the chunk after ``state.next_ref`` and append it
    - Items live in an ObservableList outside the state snapshot

Design Decisions:
    - ``fetch_more`` reads ``is_stale`` before fetching: if a ``fetch`` for a
      new search failed or is still the latest intent, the next successful
      ``fetch_more`` resets the items instead of appending to the old ones
    - Failure never touches the items; ``fetch`` has already published the
      new search and keeps it
    - Callers wanting to bound queueing wrap calls in ``asyncio.timeout``
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any, Generic, TypeVar

from ..core.config import PagingConfig
from ..core.fatal import raise_if_fatal
from ..models.events import FetchOutcome
from ..models.page import PageQuery, PageRef, PageResult
from ..models.state import ChunkingState
from .observable import Listener, Observable, ObservableList
from .telemetry import log_fetch_completed, log_fetch_error, log_fetch_started, log_query_edited

T = TypeVar("T")
S = TypeVar("S")

Fetcher = Callable[[PageQuery], Awaitable[PageResult | None]]

_ENGINE = "chunking"
_CURRENT: Any = object()


class Chunking(Generic[T, S]):
    """Manages incremental chunk loading for a list.

    Call ``fetch`` whenever the search value changes or a refresh is wanted,
    and ``fetch_more`` when more items should be loaded (e.g. on scroll).
    Both return False when the fetch failed, so the caller can retry.
    """

    def __init__(self, fetcher: Fetcher, *, config: PagingConfig | None = None) -> None:
        """Initialize chunking engine.

        Args:
            fetcher: Async function returning the chunk for a query, or None
                if the chunk could not be fetched
            config: Optional engine configuration
        """
        self._fetcher = fetcher
        self._config = config or PagingConfig()
        self._lock = asyncio.Lock()

        self.state_cell: Observable[ChunkingState] = Observable(
            ChunkingState(), name="chunking.state"
        )
        self.items_cell: ObservableList[Any] = ObservableList(name="chunking.items")
        self.loading: Observable[bool] = Observable(False, name="chunking.loading")
        self.errors: ObservableList[Exception] = ObservableList(
            maxlen=self._config.max_recorded_errors, name="chunking.errors"
        )

    @property
    def config(self) -> PagingConfig:
        return self._config

    @property
    def state(self) -> ChunkingState:
        """Current snapshot."""
        return self.state_cell.value

    @property
    def items(self) -> list[Any]:
        """Copy of the accumulated items."""
        return self.items_cell.value

    @property
    def is_loading(self) -> bool:
        return self.loading.value

    def subscribe(self, callback: Listener[ChunkingState]) -> str:
        """Subscribe to state snapshots. Returns a subscription id."""
        return self.state_cell.subscribe(callback)

    def unsubscribe(self, subscription_id: str) -> None:
        self.state_cell.unsubscribe(subscription_id)

    async def fetch(self, new_search: Any = _CURRENT, limit: int | None = None) -> bool:
        """Load the first chunk for a search value.

        The current search becomes ``new_search`` as soon as the call gets
        the lock, whether or not the fetch succeeds. On success the items
        are replaced by the fetched chunk. When ``new_search`` is omitted,
        the search is read at call time, not when the lock is acquired.

        Args:
            new_search: Search value to fetch (defaults to the current one)
            limit: Maximum number of items in the chunk (defaults to
                ``config.default_page_size``)

        Returns:
            True if the fetch succeeded, False otherwise

        Raises:
            pydantic.ValidationError: If ``limit`` is not positive
            asyncio.CancelledError: Propagated unchanged
        """
        search = self.state.search if new_search is _CURRENT else new_search

        async with self._lock:
            fetch_query = PageQuery(
                search=search,
                page_size=self._limit(limit),
                ref=PageRef(),
            )

            self.state_cell.set(
                ChunkingState(
                    search=fetch_query.search,
                    next_item_count=None,
                    next_ref=fetch_query.ref,
                    is_stale=True,
                )
            )
            log_query_edited(engine=_ENGINE, query=fetch_query)

            fetch_result = await self._call_fetcher(fetch_query)
            if fetch_result is None:
                return False

            self.items_cell.replace(fetch_result.items)
            self.state_cell.set(
                ChunkingState(
                    search=fetch_query.search,
                    next_item_count=fetch_result.next_item_count,
                    next_ref=fetch_result.next_ref,
                    is_stale=False,
                )
            )
            return True

    async def fetch_more(self, limit: int | None = None) -> bool:
        """Load the chunk following the current one and append it.

        If the state was stale when the call got the lock, the items are
        replaced instead of extended.

        Args:
            limit: Maximum number of items in the chunk (defaults to
                ``config.default_page_size``)

        Returns:
            True if the fetch succeeded, False otherwise

        Raises:
            pydantic.ValidationError: If ``limit`` is not positive
            asyncio.CancelledError: Propagated unchanged
        """
        async with self._lock:
            current = self.state
            was_stale = current.is_stale
            fetch_query = PageQuery(
                search=current.search,
                page_size=self._limit(limit),
                ref=current.next_ref,
            )

            fetch_result = await self._call_fetcher(fetch_query)
            if fetch_result is None:
                return False

            if was_stale:
                self.items_cell.replace(fetch_result.items)
            else:
                self.items_cell.extend(fetch_result.items)
            self.state_cell.set(
                ChunkingState(
                    search=fetch_query.search,
                    next_item_count=fetch_result.next_item_count,
                    next_ref=fetch_result.next_ref,
                    is_stale=False,
                )
            )
            return True

    def _limit(self, limit: int | None) -> int:
        return self._config.default_page_size if limit is None else limit

    async def _call_fetcher(self, fetch_query: PageQuery) -> PageResult | None:
        """Run the fetcher, recording recoverable failures as None."""
        self.loading.set(True)
        log_fetch_started(engine=_ENGINE, query=fetch_query, in_flight=1)
        start = perf_counter()
        try:
            fetch_result = await self._fetcher(fetch_query)
        except Exception as e:
            raise_if_fatal(e)
            self.errors.append(e)
            log_fetch_error(engine=_ENGINE, query=fetch_query, error=e)
            log_fetch_completed(
                engine=_ENGINE,
                query=fetch_query,
                outcome=FetchOutcome.FAILED,
                latency_ms=(perf_counter() - start) * 1000.0,
            )
            return None
        finally:
            self.loading.set(False)

        log_fetch_completed(
            engine=_ENGINE,
            query=fetch_query,
            outcome=FetchOutcome.DECLINED if fetch_result is None else FetchOutcome.COMMITTED,
            items=0 if fetch_result is None else len(fetch_result.items),
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return fetch_result

    # ----------------------
    # Derived values
    # ----------------------
    @property
    def search(self) -> Any:
        return self.state.search

    @property
    def is_loading_or_stale(self) -> bool:
        return self.is_loading or self.state.is_stale

    @property
    def next_item_count(self) -> int | None:
        return self.state.next_item_count

    @property
    def next_offset(self) -> int | None:
        return self.state.next_ref.offset

    @property
    def has_more(self) -> bool:
        """False only when the source reported an empty next chunk."""
        return self.next_item_count != 0

    @property
    def current_offset(self) -> int | None:
        """Offset of the first accumulated item."""
        next_offset = self.next_offset
        if next_offset is None:
            return None
        return next_offset - len(self.items_cell)

    @property
    def total_item_count(self) -> int | None:
        next_offset = self.next_offset
        next_item_count = self.next_item_count
        if next_offset is None or next_item_count is None:
            return None
        return next_offset + next_item_count
