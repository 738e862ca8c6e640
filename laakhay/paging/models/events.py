"""Fetch outcome vocabulary used by telemetry."""

from __future__ import annotations

from enum import Enum


class FetchOutcome(str, Enum):
    """How a single fetch call ended."""

    COMMITTED = "committed"
    DISCARDED = "discarded"  # succeeded, but a newer query superseded it
    DECLINED = "declined"  # fetcher returned None
    FAILED = "failed"  # recoverable exception, recorded
