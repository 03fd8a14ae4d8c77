"""Lazy stream over the paginated crate listing.

``CrateStream`` is an async iterator that fetches one page at a time, only
when the buffered items of the previous page are used up. Iteration ends on
the first empty page; a short (partial) page does not end it, so the last
page of content always costs one extra request.

States:
- IDLE: nothing buffered, no fetch running.
- FETCH_PENDING: a page fetch is in flight (never more than one).
- BUFFERED: items of the last page are waiting to be pulled.
- CLOSED: terminal; reached on an empty page, a failed fetch or ``aclose()``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from enum import Enum
from typing import Awaitable, Callable

from registry_client.schemas.query import CratesQuery
from registry_client.schemas.registry import Crate, CratesPage

logger = logging.getLogger(__name__)

PageFetcher = Callable[[CratesQuery], Awaitable[CratesPage]]


def _consume_exception(fetch: asyncio.Future[CratesPage]) -> None:
    # Marks a failure as retrieved even when the stream was dropped mid-fetch.
    if not fetch.cancelled():
        fetch.exception()


class SequenceState(str, Enum):
    IDLE = "idle"
    FETCH_PENDING = "fetch_pending"
    BUFFERED = "buffered"
    CLOSED = "closed"


class CrateStream:
    """Forward-only, non-restartable async iterator of crates.

    A failed page fetch is raised once from ``__anext__`` and closes the
    stream; later pulls end iteration. Cancelling a pull does not cancel the
    page fetch: it stays pending and the next pull picks it up.
    """

    def __init__(self, fetch_page: PageFetcher, query: CratesQuery | None = None) -> None:
        self._fetch_page = fetch_page
        self._next_query = query or CratesQuery()
        self._items: deque[Crate] = deque()
        self._pending: asyncio.Future[CratesPage] | None = None
        self._closed = False
        self.pages_requested = 0

    @property
    def state(self) -> SequenceState:
        if self._closed:
            return SequenceState.CLOSED
        if self._items:
            return SequenceState.BUFFERED
        if self._pending is not None:
            return SequenceState.FETCH_PENDING
        return SequenceState.IDLE

    @property
    def next_page(self) -> int:
        """Page number the next fetch will request."""
        return self._next_query.page

    def __aiter__(self) -> "CrateStream":
        return self

    def _start_fetch(self) -> None:
        query = self._next_query
        # Advance by exactly one page, whatever the size of the last page.
        self._next_query = query.for_page(query.page + 1)
        self.pages_requested += 1
        logger.debug("registry.crate_stream.fetch", extra={"page": query.page})
        self._pending = asyncio.ensure_future(self._fetch_page(query))
        self._pending.add_done_callback(_consume_exception)

    def _close(self) -> None:
        self._closed = True
        self._pending = None
        self._items.clear()

    async def aclose(self) -> None:
        """Close the stream and cancel a page fetch still in flight."""
        pending = self._pending
        self._close()
        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.gather(pending, return_exceptions=True)

    async def __anext__(self) -> Crate:
        while True:
            if self._closed:
                raise StopAsyncIteration

            if self._items:
                return self._items.popleft()

            if self._pending is None:
                self._start_fetch()

            pending = self._pending
            assert pending is not None
            try:
                page = await asyncio.shield(pending)
            except asyncio.CancelledError:
                if pending.cancelled() and self._pending is pending:
                    self._close()
                raise
            except Exception:
                if self._pending is not pending:
                    # Another pull already reported this failure.
                    continue
                self._close()
                raise

            if self._pending is not pending:
                # Another pull already consumed this page.
                continue
            self._pending = None

            if not page.crates:
                logger.debug(
                    "registry.crate_stream.exhausted",
                    extra={"pages_requested": self.pages_requested},
                )
                self._close()
                raise StopAsyncIteration

            first, *rest = page.crates
            self._items.extend(rest)
            return first
