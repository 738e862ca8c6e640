"""Observable cells for publishing engine state to consumers.

Engines own their state exclusively and publish every transition as one new
value. Consumers either register callbacks or iterate ``stream()``.

Architecture:
    - Observable: a single value replaced wholesale on ``set``
    - ObservableList: a list whose every mutation publishes a full copy

Design Decisions:
    - Sync callbacks run inline, in publish order, so a consumer never sees
      transitions out of order
    - Coroutine callbacks are scheduled on the running loop (fire-and-forget)
    - Listener failures are logged and never reach the publishing engine
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Listener = Callable[[V], Awaitable[None]] | Callable[[V], None]


class _Subject(ABC, Generic[V]):
    """Subscription bookkeeping shared by the observable cells."""

    def __init__(self, *, name: str | None = None) -> None:
        self.name = name or self.__class__.__name__
        self._listeners: dict[str, Listener[V]] = {}
        self._queues: list[asyncio.Queue[V]] = []
        self._pending: set[asyncio.Task[Any]] = set()
        self._outbox: deque[V] = deque()
        self._publishing = False

    def subscribe(self, callback: Listener[V]) -> str:
        """Register a callback invoked with every published value.

        Returns a subscription id to later unsubscribe.
        """
        sub_id = uuid.uuid4().hex
        self._listeners[sub_id] = callback
        return sub_id

    def unsubscribe(self, subscription_id: str) -> None:
        self._listeners.pop(subscription_id, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners) + len(self._queues)

    @abstractmethod
    def _snapshot(self) -> V:
        """Return the value a new stream starts from."""

    async def stream(self, *, include_current: bool = True) -> AsyncIterator[V]:
        """Iterate over published values.

        Args:
            include_current: Yield the current value first

        Yields:
            Each value published after the iteration started
        """
        queue: asyncio.Queue[V] = asyncio.Queue()
        self._queues.append(queue)
        try:
            if include_current:
                yield self._snapshot()
            while True:
                yield await queue.get()
        finally:
            self._queues.remove(queue)

    def _publish(self, value: V) -> None:
        """Deliver ``value`` to every subscriber.

        A publish triggered by a listener is queued behind the one in
        progress, so every subscriber sees values in publish order.
        """
        self._outbox.append(value)
        if self._publishing:
            return
        self._publishing = True
        try:
            while self._outbox:
                self._deliver(self._outbox.popleft())
        finally:
            self._outbox.clear()
            self._publishing = False

    def _deliver(self, value: V) -> None:
        for queue in self._queues:
            queue.put_nowait(value)

        for cb in list(self._listeners.values()):
            if inspect.iscoroutinefunction(cb):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    logger.warning(f"{self.name}: no running loop, skipping async listener")
                    continue
                task = loop.create_task(cb(value))
                self._pending.add(task)
                task.add_done_callback(self._on_listener_done)
            else:
                try:
                    cb(value)
                except Exception as e:
                    logger.error(f"Error in {self.name} listener: {e}", exc_info=True)

    def _on_listener_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        e = task.exception()
        if e is not None:
            logger.error(f"Error in {self.name} listener: {e}", exc_info=e)


class Observable(_Subject[V]):
    """A value cell that publishes on every assignment."""

    def __init__(self, value: V, *, name: str | None = None) -> None:
        super().__init__(name=name)
        self._value = value

    @property
    def value(self) -> V:
        return self._value

    def get(self) -> V:
        return self._value

    def set(self, value: V) -> None:
        """Replace the value and notify subscribers."""
        self._value = value
        self._publish(value)

    def _snapshot(self) -> V:
        return self._value

    def __repr__(self) -> str:
        return f"Observable(name={self.name!r}, value={self._value!r})"


class ObservableList(_Subject[list[V]]):
    """A list that publishes a full copy of itself on every mutation.

    Args:
        maxlen: Keep at most this many items, dropping the oldest first
            (None = unbounded)
    """

    def __init__(
        self,
        items: Iterable[V] = (),
        *,
        maxlen: int | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(name=name)
        self._maxlen = maxlen
        self._items: list[V] = self._bounded(list(items))

    @property
    def value(self) -> list[V]:
        return list(self._items)

    def append(self, item: V) -> None:
        self.extend([item])

    def extend(self, items: Iterable[V]) -> None:
        """Append items as a single transition."""
        self._commit([*self._items, *items])

    def replace(self, items: Iterable[V]) -> None:
        """Replace the whole content as a single transition."""
        self._commit(list(items))

    def clear(self) -> None:
        self._commit([])

    def drain(self) -> list[V]:
        """Remove and return every item."""
        drained = self._items
        self._commit([])
        return drained

    def _bounded(self, items: list[V]) -> list[V]:
        if self._maxlen is not None and len(items) > self._maxlen:
            return items[-self._maxlen :]
        return items

    def _commit(self, items: list[V]) -> None:
        self._items = self._bounded(items)
        self._publish(list(self._items))

    def _snapshot(self) -> list[V]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> V:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ObservableList(name={self.name!r}, items={self._items!r})"
