"""Composite crate views assembled from independent registry calls.

Sub-requests of one composite are started together and joined with
``asyncio.gather``: the first failure becomes the result of the whole call.
Siblings are not cancelled; whatever they return is ignored. Cancelling the
caller does not reach the sub-requests either: the join is shielded, so
requests already dispatched run to completion. Because every
request goes through the client's rate gate, "together" means concurrently
pending, not parallel on the wire.

Request cost:
- ``full_version``: 2 (authors + dependencies).
- ``full_crate`` latest only: 1 + 2 + 3 = 6, plus one request per extra
  reverse dependency page.
- ``full_crate`` all versions: 1 + 2V + 3, same reverse dependency caveat.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Protocol

from registry_client.schemas.full import FullCrate, FullVersion
from registry_client.schemas.registry import (
    Authors,
    CrateDownloads,
    CrateResponse,
    Dependency,
    ReverseDependencies,
    User,
    Version,
)

logger = logging.getLogger(__name__)


async def _join(*aws: Awaitable[Any]) -> list[Any]:
    """Gather sub-requests fail-fast; cancelling the caller leaves them running."""
    return await asyncio.shield(asyncio.gather(*aws))


class CrateSource(Protocol):
    """The client operations a composite view is built from."""

    async def get_crate(self, name: str) -> CrateResponse: ...

    async def crate_authors(self, name: str, version: str) -> Authors: ...

    async def crate_dependencies(self, name: str, version: str) -> list[Dependency]: ...

    async def crate_downloads(self, name: str) -> CrateDownloads: ...

    async def crate_owners(self, name: str) -> list[User]: ...

    async def crate_reverse_dependencies(self, name: str) -> ReverseDependencies: ...


class FullCrateAggregator:
    """Build ``FullVersion`` and ``FullCrate`` views, fail-fast."""

    def __init__(self, source: CrateSource) -> None:
        self.source = source

    async def full_version(self, version: Version) -> FullVersion:
        """Merge a version with its authors and dependencies.

        Raises:
            RegistryError: The first failure of either lookup.
        """
        authors, dependencies = await _join(
            self.source.crate_authors(version.crate_name, version.num),
            self.source.crate_dependencies(version.crate_name, version.num),
        )
        return FullVersion.from_parts(version, authors.names, dependencies)

    async def _full_versions(self, krate: CrateResponse, all_versions: bool) -> list[FullVersion]:
        if not krate.versions:
            return []
        if not all_versions:
            return [await self.full_version(krate.versions[0])]
        return await _join(*(self.full_version(v) for v in krate.versions))

    async def full_crate(self, name: str, all_versions: bool = False) -> FullCrate:
        """Retrieve all available information for a crate.

        Args:
            name: Crate name.
            all_versions: If False only the latest version is detailed; if
                True every version is, at two extra requests per version.

        Returns:
            FullCrate combining metadata, detailed versions, download stats,
            owners and every reverse dependency.

        Raises:
            RegistryError: The first failure among the sub-requests.
        """
        krate = await self.source.get_crate(name)
        versions = await self._full_versions(krate, all_versions)

        downloads, owners, reverse_dependencies = await _join(
            self.source.crate_downloads(name),
            self.source.crate_owners(name),
            self.source.crate_reverse_dependencies(name),
        )

        logger.debug(
            "registry.full_crate.assembled",
            extra={
                "crate": name,
                "versions": len(versions),
                "owners": len(owners),
                "reverse_dependencies": len(reverse_dependencies.dependencies),
            },
        )

        data = krate.crate_data
        return FullCrate(
            id=data.id,
            name=data.name,
            description=data.description,
            license=krate.versions[0].license if krate.versions else None,
            documentation=data.documentation,
            homepage=data.homepage,
            repository=data.repository,
            total_downloads=data.downloads,
            max_version=data.max_version,
            created_at=data.created_at,
            updated_at=data.updated_at,
            categories=krate.categories,
            keywords=krate.keywords,
            downloads=downloads,
            owners=owners,
            reverse_dependencies=reverse_dependencies,
            versions=versions,
        )
