"""Classification of exceptions raised by fetchers.

Engines catch fetcher failures and record them, except for a small closed
set of exception kinds that must always reach the caller:

    - Anything that is not an ``Exception`` subclass
      (``asyncio.CancelledError``, ``KeyboardInterrupt``, ``SystemExit``,
      ``GeneratorExit``). These never enter an ``except Exception`` block,
      but are classified here as well so callers holding a
      ``BaseException`` get a consistent answer.
    - Interpreter resource exhaustion (``MemoryError``, ``RecursionError``).

Usage:
    try:
        result = await fetcher(query)
    except Exception as e:
        raise_if_fatal(e)
        errors.append(e)
"""

from __future__ import annotations

FATAL_EXCEPTIONS: tuple[type[BaseException], ...] = (
    MemoryError,
    RecursionError,
)


def is_fatal(exc: BaseException) -> bool:
    """Return True if ``exc`` must propagate instead of being recorded."""
    if not isinstance(exc, Exception):
        return True
    return isinstance(exc, FATAL_EXCEPTIONS)


def raise_if_fatal(exc: BaseException) -> None:
    """Re-raise ``exc`` if it is fatal, otherwise return normally.

    Must be called from inside the ``except`` block that caught ``exc`` so
    the original traceback is preserved.
    """
    if is_fatal(exc):
        raise exc
