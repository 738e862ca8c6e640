"""Unit tests for fatal exception classification."""

from __future__ import annotations

import asyncio

import pytest

from laakhay.paging.core import is_fatal, raise_if_fatal


class TestIsFatal:
    """Test is_fatal classification."""

    @pytest.mark.parametrize(
        "exc",
        [
            asyncio.CancelledError(),
            KeyboardInterrupt(),
            SystemExit(1),
            GeneratorExit(),
            MemoryError(),
            RecursionError(),
        ],
    )
    def test_fatal_kinds(self, exc: BaseException):
        """Test that cancellation and resource exhaustion are fatal."""
        assert is_fatal(exc) is True

    @pytest.mark.parametrize(
        "exc",
        [
            ValueError("bad"),
            RuntimeError("boom"),
            TimeoutError(),
            ConnectionError("reset"),
        ],
    )
    def test_recoverable_kinds(self, exc: BaseException):
        """Test that ordinary failures are recoverable."""
        assert is_fatal(exc) is False


class TestRaiseIfFatal:
    """Test raise_if_fatal behavior inside except blocks."""

    def test_reraises_fatal(self):
        """Test that a fatal exception is re-raised unchanged."""
        original = MemoryError("out of memory")
        with pytest.raises(MemoryError) as exc_info:
            try:
                raise original
            except Exception as e:
                raise_if_fatal(e)
        assert exc_info.value is original

    def test_returns_for_recoverable(self):
        """Test that a recoverable exception is left to the caller."""
        try:
            raise ValueError("bad")
        except Exception as e:
            raise_if_fatal(e)
            caught = e
        assert isinstance(caught, ValueError)
