"""Query-addressable paging engine.

Paging holds one PagingState and lets the query be edited and fetched
concurrently. A completed fetch is committed only if the query it fetched is
still the current query when it returns; otherwise its result is dropped.

Architecture:
    - Query edits are synchronous transitions under a short lock
    - Fetches run outside the lock, so any number may be in flight
    - Reconciliation compares the fetched query with the current query

Design Decisions:
    - Fetch-then-check instead of cancel-on-edit: rapid edits (live search
      typing) never block, late responses are simply discarded
    - A discarded result still reports success (True): the fetch worked, a
      newer query is pending and the caller is expected to fetch it
    - RLock: observers run inside the critical section and may edit the query

Usage:
    paging = Paging(fetch_page)
    paging.edit_search("btc")
    if paging.state.is_stale:
        await paging.fetch()
"""

from __future__ import annotations

import threading
from collections.abc import Awaitable, Callable
from time import perf_counter
from typing import Any, Generic, TypeVar

from ..core.config import PagingConfig
from ..core.exceptions import InvalidQueryError
from ..core.fatal import raise_if_fatal
from ..models.events import FetchOutcome
from ..models.page import PageQuery, PageRef, PageResult
from ..models.state import PagingState
from ..utils.math import ceil_div
from .observable import Listener, Observable, ObservableList
from .telemetry import log_fetch_completed, log_fetch_error, log_fetch_started, log_query_edited

T = TypeVar("T")
S = TypeVar("S")

Fetcher = Callable[[PageQuery], Awaitable[PageResult | None]]
QueryTransform = Callable[[PagingState], PageQuery]

_ENGINE = "paging"
_UNSET: Any = object()


def _check_edit_args(name: str, value: Any, transform: Callable[..., Any] | None) -> None:
    if (value is _UNSET) == (transform is None):
        raise TypeError(f"Pass exactly one of {name} or transform")


class Paging(Generic[T, S]):
    """Manages the state of a paginated list.

    The caller decides when to fetch: typically whenever ``state.is_stale``
    turns true (after debouncing), or on demand to refresh or retry.

    Errors raised by the fetcher are collected in ``errors``; cancellation
    always propagates.
    """

    def __init__(self, fetcher: Fetcher, *, config: PagingConfig | None = None) -> None:
        """Initialize paging engine.

        Args:
            fetcher: Async function returning the page for a query, or None
                if the page could not be fetched
            config: Optional engine configuration
        """
        self._fetcher = fetcher
        self._config = config or PagingConfig()
        self._lock = threading.RLock()

        initial = PagingState(query=PageQuery(page_size=self._config.default_page_size))
        self.state_cell: Observable[PagingState] = Observable(initial, name="paging.state")
        self.loading_count: Observable[int] = Observable(0, name="paging.loading")
        self.errors: ObservableList[Exception] = ObservableList(
            maxlen=self._config.max_recorded_errors, name="paging.errors"
        )

    @property
    def config(self) -> PagingConfig:
        return self._config

    @property
    def state(self) -> PagingState:
        """Current snapshot."""
        return self.state_cell.value

    @property
    def is_loading(self) -> bool:
        """True while at least one fetch is in flight."""
        return self.loading_count.value > 0

    def subscribe(self, callback: Listener[PagingState]) -> str:
        """Subscribe to state snapshots. Returns a subscription id."""
        return self.state_cell.subscribe(callback)

    def unsubscribe(self, subscription_id: str) -> None:
        self.state_cell.unsubscribe(subscription_id)

    # ----------------------
    # Query edits
    # ----------------------
    def edit_query(self, query: PageQuery | QueryTransform) -> None:
        """Atomically replace the current query.

        Args:
            query: The new query, or a function computing it from the
                current state

        Raises:
            InvalidQueryError: If the function does not return a PageQuery
        """
        with self._lock:
            self._apply_query(self._resolve(query))

    def edit_search(
        self,
        search: Any = _UNSET,
        *,
        transform: Callable[[Any], Any] | None = None,
    ) -> None:
        """Replace the search value and reset the page reference.

        The value is used as-is, even when it is callable.

        Args:
            search: New search value
            transform: Function computing the new search from the current one

        Raises:
            TypeError: If both or neither of ``search`` and ``transform`` are given
        """
        _check_edit_args("search", search, transform)

        def apply(state: PagingState) -> PageQuery:
            current = state.query
            new_search = transform(current.search) if transform is not None else search
            return PageQuery(search=new_search, page_size=current.page_size)

        self.edit_query(apply)

    def edit_page_size(
        self,
        page_size: int = _UNSET,
        *,
        transform: Callable[[int], int] | None = None,
    ) -> None:
        """Replace the page size and reset the page reference.

        Args:
            page_size: New page size
            transform: Function computing the new size from the current one

        Raises:
            TypeError: If both or neither of ``page_size`` and ``transform`` are given
            pydantic.ValidationError: If the new page size is not positive
        """
        _check_edit_args("page_size", page_size, transform)

        def apply(state: PagingState) -> PageQuery:
            current = state.query
            new_size = transform(current.page_size) if transform is not None else page_size
            return PageQuery(search=current.search, page_size=new_size)

        self.edit_query(apply)

    def advance(self) -> None:
        """Point the query at the page following the current result."""
        self.edit_query(lambda state: state.query.model_copy(update={"ref": state.result.next_ref}))

    def advance_to(
        self,
        ref: PageRef | None = None,
        *,
        cursor: str | None = None,
        offset: int | None = None,
    ) -> None:
        """Point the query at a specific page.

        Args:
            ref: Page reference to move to (takes precedence)
            cursor: Cursor of the page, used when ``ref`` is None
            offset: Offset of the page, used when ``ref`` is None
        """
        target = ref if ref is not None else PageRef(cursor=cursor, offset=offset)
        self.edit_query(lambda state: state.query.model_copy(update={"ref": target}))

    # ----------------------
    # Fetching
    # ----------------------
    async def fetch(self, query: PageQuery | QueryTransform | None = None) -> bool:
        """Fetch a query and commit its result if it is still current.

        Args:
            query: Query to fetch, or a function computing it from the
                current state (None = fetch the current query)

        Returns:
            True if the fetch succeeded (whether or not its result was
            committed) or if the query has changed since the fetch started;
            False if the fetch failed and its query is still current.

        Raises:
            InvalidQueryError: If the function does not return a PageQuery
            asyncio.CancelledError: Propagated unchanged
        """
        with self._lock:
            fetch_query = self._resolve(query)
            self._apply_query(fetch_query)
            in_flight = self.loading_count.value + 1
            self.loading_count.set(in_flight)

        log_fetch_started(engine=_ENGINE, query=fetch_query, in_flight=in_flight)
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
            return fetch_query != self.state.query
        finally:
            with self._lock:
                self.loading_count.set(self.loading_count.value - 1)

        latency_ms = (perf_counter() - start) * 1000.0

        if fetch_result is None:
            log_fetch_completed(
                engine=_ENGINE,
                query=fetch_query,
                outcome=FetchOutcome.DECLINED,
                latency_ms=latency_ms,
            )
            return fetch_query != self.state.query

        with self._lock:
            committed = fetch_query == self.state.query
            if committed:
                self.state_cell.set(
                    PagingState(query=fetch_query, result=fetch_result, is_stale=False)
                )

        log_fetch_completed(
            engine=_ENGINE,
            query=fetch_query,
            outcome=FetchOutcome.COMMITTED if committed else FetchOutcome.DISCARDED,
            items=len(fetch_result.items),
            latency_ms=latency_ms,
        )
        return True

    def _resolve(self, query: PageQuery | QueryTransform | None) -> PageQuery:
        state = self.state
        if query is None:
            return state.query
        if isinstance(query, PageQuery):
            return query
        new_query = query(state)
        if not isinstance(new_query, PageQuery):
            raise InvalidQueryError(
                f"Query transform returned {type(new_query).__name__}, expected PageQuery",
                value=new_query,
            )
        return new_query

    def _apply_query(self, new_query: PageQuery) -> None:
        # Caller holds the lock.
        current = self.state
        if new_query == current.query:
            return
        self.state_cell.set(PagingState(query=new_query, result=current.result, is_stale=True))
        log_query_edited(engine=_ENGINE, query=new_query)

    # ----------------------
    # Derived values
    # ----------------------
    @property
    def search(self) -> Any:
        return self.state.query.search

    @property
    def page_size(self) -> int:
        return self.state.query.page_size

    @property
    def items(self) -> list[Any]:
        """Copy of the displayed page's items."""
        return list(self.state.result.items)

    @property
    def is_loading_or_stale(self) -> bool:
        return self.is_loading or self.state.is_stale

    @property
    def next_item_count(self) -> int | None:
        return self.state.result.next_item_count

    @property
    def next_offset(self) -> int | None:
        return self.state.result.next_ref.offset

    @property
    def has_more(self) -> bool:
        """False only when the source reported an empty next page."""
        return self.next_item_count != 0

    @property
    def current_offset(self) -> int | None:
        next_offset = self.next_offset
        if next_offset is None:
            return None
        return next_offset - len(self.items)

    @property
    def total_item_count(self) -> int | None:
        next_offset = self.next_offset
        next_item_count = self.next_item_count
        if next_offset is None or next_item_count is None:
            return None
        return next_offset + next_item_count

    @property
    def page_ordinal(self) -> int | None:
        """Zero-based index of the displayed page."""
        current_offset = self.current_offset
        if current_offset is None:
            return None
        return current_offset // self.page_size

    @property
    def page_number(self) -> int | None:
        """One-based number of the displayed page."""
        page_ordinal = self.page_ordinal
        if page_ordinal is None:
            return None
        return page_ordinal + 1

    @property
    def next_page_count(self) -> int | None:
        next_item_count = self.next_item_count
        if next_item_count is None:
            return None
        return ceil_div(next_item_count, self.page_size)

    @property
    def total_page_count(self) -> int | None:
        total_item_count = self.total_item_count
        if total_item_count is None:
            return None
        return ceil_div(total_item_count, self.page_size)
