"""Structured logging for paging operations.

This module provides telemetry hooks for both engines, emitting structured
logs with the event name as message and details in ``extra``.
"""

from __future__ import annotations

import logging

from ..models.events import FetchOutcome
from ..models.page import PageQuery

logger = logging.getLogger(__name__)


def _describe_query(query: PageQuery) -> dict[str, object]:
    return {
        "search": repr(query.search),
        "page_size": query.page_size,
        "cursor": query.ref.cursor,
        "offset": query.ref.offset,
    }


def log_query_edited(*, engine: str, query: PageQuery) -> None:
    """Log an accepted query edit (state marked stale).

    Args:
        engine: Engine identifier ("paging" or "chunking")
        query: The new current query
    """
    logger.debug(
        "query_edited",
        extra={"engine": engine, **_describe_query(query)},
    )


def log_fetch_started(*, engine: str, query: PageQuery, in_flight: int) -> None:
    """Log the start of a fetcher call.

    Args:
        engine: Engine identifier
        query: Query handed to the fetcher
        in_flight: Number of fetches running, this one included
    """
    logger.debug(
        "fetch_started",
        extra={"engine": engine, "in_flight": in_flight, **_describe_query(query)},
    )


def log_fetch_completed(
    *,
    engine: str,
    query: PageQuery,
    outcome: FetchOutcome,
    items: int = 0,
    latency_ms: float | None = None,
) -> None:
    """Log the end of a fetcher call.

    Args:
        engine: Engine identifier
        query: Query handed to the fetcher
        outcome: How the fetch ended
        items: Number of items received
        latency_ms: Fetcher latency in milliseconds (optional)
    """
    logger.info(
        "fetch_completed",
        extra={
            "engine": engine,
            "outcome": outcome.value,
            "items": items,
            "latency_ms": latency_ms,
            **_describe_query(query),
        },
    )


def log_fetch_error(
    *,
    engine: str,
    query: PageQuery,
    error: Exception,
) -> None:
    """Log a recoverable fetcher failure.

    Args:
        engine: Engine identifier
        query: Query handed to the fetcher
        error: The recorded exception
    """
    logger.warning(
        "fetch_error",
        exc_info=error,
        extra={
            "engine": engine,
            "error_type": type(error).__name__,
            "error_message": str(error),
            **_describe_query(query),
        },
    )
