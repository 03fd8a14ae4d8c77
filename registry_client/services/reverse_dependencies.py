"""Reverse dependency paging.

The registry serves reverse dependencies in pages of at most 100 items,
with dependencies and the versions declaring them sent as separate lists.
This pager joins them and can drain every page of a crate.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from registry_client.adapters.http.base import AbstractTransport
from registry_client.schemas.registry import (
    Meta,
    ReverseDependencies,
    ReverseDependenciesPage,
)

logger = logging.getLogger(__name__)

REVERSE_DEPENDENCIES_PAGE_SIZE = 100


class ReverseDependencyPager:
    """Fetch reverse dependencies of a crate through the transport."""

    def __init__(self, transport: AbstractTransport) -> None:
        self.transport = transport

    async def _fetch(self, crate_name: str, page: int) -> ReverseDependenciesPage:
        return await self.transport.get(
            f"crates/{quote(crate_name, safe='')}/reverse_dependencies",
            ReverseDependenciesPage,
            params=[
                ("per_page", str(REVERSE_DEPENDENCIES_PAGE_SIZE)),
                ("page", str(page)),
            ],
        )

    async def page(self, crate_name: str, page: int = 1) -> ReverseDependencies:
        """Get a single page of reverse dependencies.

        Args:
            crate_name: Crate whose dependents are listed.
            page: 1-based page number; values below 1 are treated as 1.

        Returns:
            ReverseDependencies holding this page's items and the total
            reported by the registry.
        """
        received = await self._fetch(crate_name, max(page, 1))
        deps = ReverseDependencies(meta=Meta(total=received.meta.total))
        deps.extend(received)
        return deps

    async def all(self, crate_name: str, *, max_pages: int | None = None) -> ReverseDependencies:
        """Load all reverse dependencies of a crate.

        Pages are requested from 1 until the registry returns an empty page,
        so a crate with N full pages costs N + 1 requests. ``max_pages`` bounds
        the number of requests; by default the loop only ends on an empty page.

        Args:
            crate_name: Crate whose dependents are listed.
            max_pages: Optional cap on pages requested, at least 1.

        Returns:
            ReverseDependencies with every page's items in page order; the
            total is the one reported by the last non-empty page.

        Raises:
            ValueError: If max_pages is below 1.
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be >= 1")

        deps = ReverseDependencies()
        page_number = 1

        while max_pages is None or page_number <= max_pages:
            received = await self._fetch(crate_name, page_number)
            if not received.dependencies:
                break
            deps.extend(received)
            deps.meta.total = received.meta.total
            page_number += 1
        else:
            logger.warning(
                "registry.reverse_dependencies.page_cap",
                extra={"crate": crate_name, "max_pages": max_pages},
            )

        logger.debug(
            "registry.reverse_dependencies.loaded",
            extra={
                "crate": crate_name,
                "last_page": page_number,
                "items": len(deps.dependencies),
                "total": deps.meta.total,
            },
        )
        return deps

    async def count(self, crate_name: str) -> int:
        """Get the total count of reverse dependencies for a crate."""

        first = await self.page(crate_name, 1)
        return first.meta.total
