"""In-memory minimum-interval rate gate.

Notes:
- Per-process only: two independent clients each enforce their own spacing.
- Capacity 1: the gate is held from the wait until the response has been
  classified, so requests sharing a gate never overlap.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from registry_client.adapters.rate_limit.base import AbstractRateGate, RateSlot

logger = logging.getLogger(__name__)


class MinimumIntervalGate(AbstractRateGate):
    """Serialize requests and space them by a minimum interval.

    The interval is measured from the completion of the previous responded
    request to the start of the next one. A request that failed before any
    response was obtained does not count as a completion.
    """

    def __init__(
        self,
        *,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the gate.

        Args:
            min_interval: Minimum spacing in seconds (0 still serializes).
            clock: Monotonic time source in seconds.
            sleep: Coroutine function used to wait out the remaining delta.

        Raises:
            ValueError: If min_interval is negative.
        """
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")

        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_completed: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def last_completed(self) -> float | None:
        return self._last_completed

    def _remaining_delay(self) -> float:
        if self._last_completed is None:
            return 0.0
        elapsed = self._clock() - self._last_completed
        return max(0.0, self._min_interval - elapsed)

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[RateSlot]:
        async with self._lock:
            slot = RateSlot()
            delay = self._remaining_delay()
            if delay > 0:
                logger.debug("registry.rate_gate.wait", extra={"wait_s": round(delay, 4)})
                # Still holding the lock: nobody else may start meanwhile.
                await self._sleep(delay)
                slot.waited_seconds = delay
            try:
                yield slot
            finally:
                if slot.responded:
                    self._last_completed = self._clock()
