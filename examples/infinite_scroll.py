#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import random

from laakhay.paging import Chunking, PageQuery, PageRef, PageResult


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Infinite scroll over a flaky source with Chunking")
    p.add_argument("search", nargs="?", default="row")
    p.add_argument("total", nargs="?", type=int, default=50)
    p.add_argument("chunk", nargs="?", type=int, default=12)
    p.add_argument("failure_rate", nargs="?", type=float, default=0.2)
    return p.parse_args()


def make_source(total: int, failure_rate: float):
    async def fetch_rows(query: PageQuery) -> PageResult[str]:
        await asyncio.sleep(0.02)
        if random.random() < failure_rate:
            raise ConnectionError("simulated network error")
        offset = query.ref.offset or 0
        end = min(offset + query.page_size, total)
        rows = [f"{query.search}-{i}" for i in range(offset, end)]
        return PageResult(items=rows, next_item_count=total - end, next_ref=PageRef(offset=end))

    return fetch_rows


async def main() -> None:
    args = parse_args()
    chunking: Chunking[str, str] = Chunking(make_source(args.total, args.failure_rate))
    chunking.items_cell.subscribe(lambda items: print(f"loaded {len(items):>4} rows"))

    while not await chunking.fetch(args.search, args.chunk):
        print("retrying first chunk")

    # Each iteration stands for the user reaching the end of the list
    while chunking.has_more:
        if not await chunking.fetch_more(args.chunk):
            print(f"chunk failed ({chunking.errors[-1]}), retrying")

    print("=" * 40)
    print(f"Search  : {chunking.search}")
    print(f"Rows    : {len(chunking.items)} / {chunking.total_item_count}")
    print(f"Errors  : {len(chunking.errors)}")
    print(f"Last    : {chunking.items[-1]}")


if __name__ == "__main__":
    asyncio.run(main())
