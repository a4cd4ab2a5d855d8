"""
Bounded Scheduler: Sliding-Window Concurrency over a Lazy Source

Runs awaitables pulled from a plain (synchronous) iterator with at most
`limit` in flight, yielding each result as soon as it completes.

The source must be a normal iterator of not-yet-started awaitables (for
example a generator of coroutine objects). An async generator could only
advance one step at a time, which would serialize the work.

Algorithm (slot array + completion race):
1. Fill: pull up to `limit` items, one per numbered slot. A slot that
   finds the source exhausted is retired immediately.
2. Steady state: race the occupied slots. Each finished slot has its
   result yielded, then is refilled from the source, or retired if the
   source is exhausted.
3. Drain: once the source is exhausted, keep racing the remaining slots
   until none are left.

Invariants:
- Every item produced by the source is started exactly once.
- In-flight count <= min(limit, unstarted + in-flight items).
- The source is only pulled when a slot is free.
- Output order is completion order, not input order.

An exception from any operation (or from the source itself) ends the
run: it is re-raised to the consumer after the other in-flight
operations are cancelled and awaited.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Iterable, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoundedScheduler:
    """
    Sliding-window executor for a lazy, finite source of awaitables.

    Usage:
        scheduler = BoundedScheduler(limit=8)
        async for outcome in scheduler.run(executor.execute(p) for p in plans):
            ...
    """

    __slots__ = ("_limit", "_peak_in_flight", "_started")

    def __init__(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        self._limit = limit
        self._peak_in_flight = 0
        self._started = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def peak_in_flight(self) -> int:
        """Highest number of simultaneously running operations seen."""
        return self._peak_in_flight

    @property
    def started(self) -> int:
        """Number of operations started by the most recent run."""
        return self._started

    async def run(self, source: Iterable[Awaitable[T]]) -> AsyncIterator[T]:
        self._peak_in_flight = 0
        self._started = 0
        items = iter(source)
        # slot index -> running task; retired slots are absent
        slots: dict[int, asyncio.Future[T]] = {}

        try:
            for index in range(self._limit):
                task = self._pull(items)
                if task is None:
                    break
                slots[index] = task
            self._observe(len(slots))

            exhausted = len(slots) < self._limit
            while slots:
                by_task = {task: index for index, task in slots.items()}
                done, _ = await asyncio.wait(
                    by_task.keys(), return_when=asyncio.FIRST_COMPLETED
                )
                for index in sorted(by_task[task] for task in done):
                    task = slots.pop(index)
                    result = task.result()
                    if not exhausted:
                        refill = self._pull(items)
                        if refill is None:
                            exhausted = True
                        else:
                            slots[index] = refill
                            self._observe(len(slots))
                    yield result
        finally:
            await self._cancel(slots.values())

    def _pull(self, items: Iterator[Awaitable[T]]) -> Optional[asyncio.Future[T]]:
        """Start the next source item, or None when the source is exhausted."""
        try:
            awaitable = next(items)
        except StopIteration:
            return None
        self._started += 1
        return asyncio.ensure_future(awaitable)

    def _observe(self, in_flight: int) -> None:
        if in_flight > self._peak_in_flight:
            self._peak_in_flight = in_flight

    @staticmethod
    async def _cancel(tasks: Iterable[asyncio.Future[T]]) -> None:
        remaining = list(tasks)
        if not remaining:
            return
        pending = [task for task in remaining if not task.done()]
        if pending:
            logger.warning("Cancelling %d in-flight operation(s)", len(pending))
            for task in pending:
                task.cancel()
        # Also collects exceptions of finished-but-unread tasks
        await asyncio.gather(*remaining, return_exceptions=True)


async def run_bounded(limit: int, source: Iterable[Awaitable[T]]) -> AsyncIterator[T]:
    """Functional shorthand for BoundedScheduler(limit).run(source)."""
    async for result in BoundedScheduler(limit).run(source):
        yield result
