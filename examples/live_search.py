#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from laakhay.paging import PageQuery, PageRef, PageResult, Paging, PagingConfig

WORDS = [f"{base}{n}" for base in ("btc", "eth", "sol", "bnb") for n in range(40)]


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Live search over an in-memory list with Paging")
    p.add_argument("keystrokes", nargs="?", default="eth1")
    p.add_argument("page_size", nargs="?", type=int, default=5)
    p.add_argument("debounce_ms", nargs="?", type=int, default=150)
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args()


async def search_words(query: PageQuery) -> PageResult[str]:
    # Simulated backend latency
    await asyncio.sleep(0.05)
    matches = [w for w in WORDS if w.startswith(query.search or "")]
    offset = query.ref.offset or 0
    page = matches[offset : offset + query.page_size]
    next_offset = offset + len(page)
    return PageResult(
        items=page,
        next_item_count=len(matches) - next_offset,
        next_ref=PageRef(offset=next_offset),
    )


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    paging: Paging[str, str] = Paging(
        search_words, config=PagingConfig(default_page_size=args.page_size)
    )
    paging.subscribe(
        lambda state: print(f"state  stale={state.is_stale} search={state.query.search!r}")
    )

    # Simulate typing, one character at a time
    typed = ""
    for ch in args.keystrokes:
        typed += ch
        paging.edit_search(typed)
        await asyncio.sleep(0.02)

    # Debounce: fetch once typing settled
    await asyncio.sleep(args.debounce_ms / 1000)
    while paging.state.is_stale:
        if not await paging.fetch():
            print("Fetch failed:", paging.errors.value)
            return

    print("=" * 40)
    print(f"Search     : {paging.search!r}")
    print(f"Page       : {paging.page_number} / {paging.total_page_count}")
    print(f"Total      : {paging.total_item_count}")
    print("=" * 40)
    for item in paging.items:
        print(item)

    if paging.has_more:
        paging.advance()
        await paging.fetch()
        print("-" * 40)
        print(f"Page {paging.page_number}: {paging.items}")


if __name__ == "__main__":
    asyncio.run(main())
