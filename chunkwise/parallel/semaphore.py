"""
Async counting semaphore for bounded chunk fan-out.

Gates how many processor invocations run at once. Unlike
``asyncio.Semaphore`` the wait queue is strictly FIFO: a released permit is
handed straight to the oldest waiter, so a newly arriving ``acquire`` can
never overtake a task that is already queued.

Concurrency Model:
    - Single event loop, no locks needed (all state changes are synchronous)
    - Permit count never exceeds the initial capacity
    - Cancellation while queued removes the waiter; cancellation after a
      hand-off passes the permit on to the next waiter
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque

logger = logging.getLogger(__name__)


@dataclass
class SemaphoreStats:
    """Statistics for semaphore monitoring.

    Attributes:
        total_acquired: Number of successful acquisitions
        queued_count: Number of acquisitions that had to wait
        max_waiting: Largest observed wait queue length
    """

    total_acquired: int = 0
    queued_count: int = 0
    max_waiting: int = 0


class Semaphore:
    """
    FIFO counting semaphore.

    Example:
        >>> semaphore = Semaphore(4)
        >>> async with semaphore:
        ...     result = await processor(chunk, index)

        >>> # Or with explicit acquire/release
        >>> await semaphore.acquire()
        >>> try:
        ...     result = await processor(chunk, index)
        ... finally:
        ...     semaphore.release()
    """

    def __init__(self, permits: int) -> None:
        """
        Initialize the semaphore.

        Args:
            permits: Number of concurrent holders allowed (clamped to >= 1)
        """
        if permits < 1:
            logger.warning("Semaphore permits %d < 1, clamping to 1", permits)
            permits = 1

        self._capacity = permits
        self._permits = permits
        self._waiters: Deque[asyncio.Future[None]] = deque()
        self._stats = SemaphoreStats()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available(self) -> int:
        """Permits that can be acquired without waiting."""
        return self._permits

    @property
    def waiting(self) -> int:
        return sum(1 for waiter in self._waiters if not waiter.done())

    @property
    def stats(self) -> SemaphoreStats:
        return self._stats

    def locked(self) -> bool:
        return self._permits == 0

    async def acquire(self) -> None:
        """
        Wait until a permit is available and take it.

        Requests that cannot be served immediately are resumed in the order
        they arrived.
        """
        if self._permits > 0 and not self._waiters:
            self._permits -= 1
            self._stats.total_acquired += 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        self._stats.queued_count += 1
        self._stats.max_waiting = max(self._stats.max_waiting, len(self._waiters))

        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Permit was handed over before the cancellation landed
                self.release()
            else:
                try:
                    self._waiters.remove(waiter)
                except ValueError:
                    pass
            raise

        self._stats.total_acquired += 1

    def release(self) -> None:
        """
        Return a permit.

        Hands the permit directly to the oldest live waiter if there is one,
        otherwise returns it to the pool.

        Raises:
            ValueError: If released more times than acquired
        """
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

        if self._permits >= self._capacity:
            raise ValueError("Semaphore released too many times")
        self._permits += 1

    async def __aenter__(self) -> "Semaphore":
        """Context manager entry - acquires a permit."""
        await self.acquire()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - always releases the permit."""
        self.release()
