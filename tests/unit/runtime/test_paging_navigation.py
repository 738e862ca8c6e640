"""Unit tests for Paging navigation helpers and derived values."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from laakhay.paging import PageQuery, PageRef, PageResult, Paging


def make_paging(result: PageResult, *, page_size: int = 10) -> Paging:
    """Build a Paging whose state holds ``result`` for a settled query."""
    paging = Paging(AsyncMock(return_value=result))
    paging.edit_page_size(page_size)
    return paging


class TestDerivedValues:
    """Test arithmetic layered on the state."""

    @pytest.mark.asyncio
    async def test_middle_page(self):
        """Test values for the third page of 10 with 25 items left."""
        paging = make_paging(
            PageResult(items=list(range(10)), next_item_count=25, next_ref=PageRef(offset=30))
        )
        await paging.fetch()

        assert paging.items == list(range(10))
        assert paging.current_offset == 20
        assert paging.total_item_count == 55
        assert paging.page_ordinal == 2
        assert paging.page_number == 3
        assert paging.next_page_count == 3
        assert paging.total_page_count == 6
        assert paging.has_more is True

    @pytest.mark.asyncio
    async def test_last_page(self):
        """Test values when the source reports nothing after this page."""
        paging = make_paging(
            PageResult(items=[1, 2, 3], next_item_count=0, next_ref=PageRef(offset=3)),
            page_size=24,
        )
        await paging.fetch()

        assert paging.has_more is False
        assert paging.current_offset == 0
        assert paging.page_number == 1
        assert paging.next_page_count == 0
        assert paging.total_page_count == 1

    @pytest.mark.asyncio
    async def test_unknown_counts(self):
        """Test that unknown inputs yield None and count as more."""
        paging = make_paging(PageResult(items=["a"], next_ref=PageRef(cursor="next")))
        await paging.fetch()

        assert paging.has_more is True
        assert paging.next_offset is None
        assert paging.current_offset is None
        assert paging.page_number is None
        assert paging.total_item_count is None
        assert paging.next_page_count is None
        assert paging.total_page_count is None

    def test_is_loading_or_stale(self):
        """Test that an edit alone makes the engine loading-or-stale."""
        paging = Paging(AsyncMock(return_value=None))
        assert paging.is_loading_or_stale is False
        paging.edit_search("x")
        assert paging.is_loading_or_stale is True


class TestNavigation:
    """Test query navigation helpers."""

    def test_edit_search_resets_ref(self):
        """Test that changing the search goes back to the first page."""
        paging = Paging(AsyncMock())
        paging.advance_to(offset=40)
        paging.edit_search("btc")

        assert paging.search == "btc"
        assert paging.state.query.ref == PageRef()

    def test_edit_search_with_transform(self):
        """Test transforming the current search value."""
        paging = Paging(AsyncMock())
        paging.edit_search("btc")
        paging.edit_search(transform=lambda search: f"{search}usdt")
        assert paging.search == "btcusdt"

    def test_edit_page_size_resets_ref_and_keeps_search(self):
        """Test that changing the page size keeps the search."""
        paging = Paging(AsyncMock())
        paging.edit_query(PageQuery(search="eth", page_size=10, ref=PageRef(offset=30)))
        paging.edit_page_size(transform=lambda size: size * 2)

        assert paging.state.query == PageQuery(search="eth", page_size=20)

    def test_edit_page_size_rejects_zero(self):
        """Test that a non-positive page size is rejected."""
        paging = Paging(AsyncMock())
        with pytest.raises(ValidationError):
            paging.edit_page_size(0)
        assert paging.page_size == 24

    @pytest.mark.asyncio
    async def test_advance_follows_next_ref(self):
        """Test that advance targets the result's next page."""
        paging = Paging(
            AsyncMock(return_value=PageResult(items=[1], next_ref=PageRef(cursor="p2")))
        )
        await paging.fetch()
        paging.advance()

        assert paging.state.query.ref == PageRef(cursor="p2")
        assert paging.state.is_stale is True

    def test_advance_to_ref_takes_precedence(self):
        """Test advance_to with an explicit reference."""
        paging = Paging(AsyncMock())
        paging.advance_to(PageRef(cursor="abc"), offset=5)
        assert paging.state.query.ref == PageRef(cursor="abc")

    def test_advance_to_cursor_and_offset(self):
        """Test advance_to built from cursor and offset."""
        paging = Paging(AsyncMock())
        paging.advance_to(cursor="abc", offset=5)
        assert paging.state.query.ref == PageRef(cursor="abc", offset=5)

    def test_callable_search_value_is_kept(self):
        """Test that a callable search value is stored, not invoked."""

        def only_spot(symbol: str) -> bool:
            return symbol.endswith("USDT")

        paging = Paging(AsyncMock())
        paging.edit_search(only_spot)
        assert paging.search is only_spot

    @pytest.mark.parametrize("kwargs", [{}, {"search": "btc", "transform": str.upper}])
    def test_edit_search_requires_one_argument(self, kwargs):
        """Test that exactly one of value and transform must be given."""
        paging = Paging(AsyncMock())
        with pytest.raises(TypeError):
            paging.edit_search(**kwargs)

    def test_edit_page_size_requires_one_argument(self):
        """Test that edit_page_size rejects both value and transform."""
        paging = Paging(AsyncMock())
        with pytest.raises(TypeError):
            paging.edit_page_size(10, transform=lambda size: size)
        assert paging.state.is_stale is False


class TestItemsSnapshot:
    """Test that item access cannot alter committed state."""

    @pytest.mark.asyncio
    async def test_items_returns_copy(self):
        """Test that mutating the returned list leaves the state intact."""
        paging = Paging(AsyncMock(return_value=PageResult(items=[1, 2])))
        await paging.fetch()

        items = paging.items
        items.append(3)

        assert paging.items == [1, 2]
        assert paging.state.result.items == [1, 2]
