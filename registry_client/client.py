"""Asynchronous client for the crates.io registry API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from registry_client.adapters.http.base import AbstractTransport
from registry_client.adapters.http.factory import create_transport
from registry_client.adapters.http.rate_gated import RateGatedTransport
from registry_client.adapters.rate_limit.in_memory import MinimumIntervalGate
from registry_client.core.config import DEFAULT_BASE_URL, RegistrySettings
from registry_client.schemas.full import FullCrate
from registry_client.schemas.query import CratesQuery
from registry_client.schemas.registry import (
    Authors,
    AuthorsResponse,
    CrateDownloads,
    CrateResponse,
    CratesPage,
    Dependencies,
    Dependency,
    Owners,
    ReverseDependencies,
    Summary,
    User,
    UserResponse,
)
from registry_client.services.aggregator import FullCrateAggregator
from registry_client.services.crate_stream import CrateStream
from registry_client.services.reverse_dependencies import ReverseDependencyPager


def _segment(value: str) -> str:
    return quote(value, safe="")


class AsyncClient:
    """Read-only client for the registry API.

    To respect the registry's crawler policy, a descriptive user agent and a
    rate limit interval are mandatory. At most one request runs at a time,
    even with an interval of 0, and consecutive requests are spaced by at
    least ``rate_limit`` seconds. Clones share that gate.

    Example user agent: ``"my_bot (my_bot.com/info)"``.

    Usage:
        async with AsyncClient("my_bot (help@my_bot.com)", 1.0) as client:
            summary = await client.summary()
    """

    def __init__(
        self,
        user_agent: str,
        rate_limit: float,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            user_agent: Identifying User-Agent sent with every request.
            rate_limit: Minimum interval between requests, in seconds.
            base_url: API origin.
            timeout_seconds: Per-request timeout; None waits indefinitely.
            http_transport: Optional httpx transport for the HTTP session.

        Raises:
            ConfigurationError: If the user agent is empty.
            ValueError: If rate_limit is negative.
        """
        self.transport: AbstractTransport = RateGatedTransport(
            user_agent=user_agent,
            gate=MinimumIntervalGate(min_interval=rate_limit),
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            http_transport=http_transport,
        )
        self._reverse_dependencies = ReverseDependencyPager(self.transport)
        self._aggregator = FullCrateAggregator(self)

    @classmethod
    def from_transport(cls, transport: AbstractTransport) -> "AsyncClient":
        client = cls.__new__(cls)
        client.transport = transport
        client._reverse_dependencies = ReverseDependencyPager(transport)
        client._aggregator = FullCrateAggregator(client)
        return client

    def clone(self) -> "AsyncClient":
        """Return a client sharing this one's HTTP session and rate gate."""
        return AsyncClient.from_transport(self.transport)

    async def aclose(self) -> None:
        """Close the HTTP session shared by this client and its clones."""
        await self.transport.aclose()

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def summary(self) -> Summary:
        """Retrieve a summary containing registry-wide information."""
        return await self.transport.get("summary", Summary)

    async def get_crate(self, name: str) -> CrateResponse:
        """Retrieve information of a crate.

        If you require detailed information, consider using ``full_crate``.
        """
        return await self.transport.get(f"crates/{_segment(name)}", CrateResponse)

    async def crate_downloads(self, name: str) -> CrateDownloads:
        """Retrieve download stats for a crate."""
        return await self.transport.get(f"crates/{_segment(name)}/downloads", CrateDownloads)

    async def crate_owners(self, name: str) -> list[User]:
        """Retrieve the owners of a crate."""
        owners = await self.transport.get(f"crates/{_segment(name)}/owners", Owners)
        return owners.users

    async def crate_reverse_dependencies_page(self, name: str, page: int) -> ReverseDependencies:
        """Get a single page of reverse dependencies (page < 1 is read as 1)."""
        return await self._reverse_dependencies.page(name, page)

    async def crate_reverse_dependencies(self, name: str) -> ReverseDependencies:
        """Load all reverse dependencies of a crate.

        The endpoint is paginated, so crates with more than 100 reverse
        dependencies cost several requests.
        """
        return await self._reverse_dependencies.all(name)

    async def crate_reverse_dependency_count(self, name: str) -> int:
        """Get the total count of reverse dependencies for a crate."""
        return await self._reverse_dependencies.count(name)

    async def crate_authors(self, name: str, version: str) -> Authors:
        """Retrieve the authors for a crate version."""
        response = await self.transport.get(
            f"crates/{_segment(name)}/{_segment(version)}/authors", AuthorsResponse
        )
        return Authors(names=response.meta.names)

    async def crate_dependencies(self, name: str, version: str) -> list[Dependency]:
        """Retrieve the dependencies of a crate version."""
        response = await self.transport.get(
            f"crates/{_segment(name)}/{_segment(version)}/dependencies", Dependencies
        )
        return response.dependencies

    async def full_crate(self, name: str, all_versions: bool = False) -> FullCrate:
        """Retrieve all available information for a crate.

        Includes download stats, owners and reverse dependencies. With
        ``all_versions`` every version is detailed (two extra requests per
        version); otherwise only the latest one.
        """
        return await self._aggregator.full_crate(name, all_versions)

    async def crates(self, query: CratesQuery | None = None) -> CratesPage:
        """Retrieve a page of crates, optionally constrained by a query.

        To get all results without handling paging, use ``crates_stream``.
        """
        query = query or CratesQuery()
        return await self.transport.get("crates", CratesPage, params=query.to_params())

    def crates_stream(self, query: CratesQuery | None = None) -> CrateStream:
        """Stream every crate matching a query, starting at ``query.page``."""
        return CrateStream(self.clone().crates, query)

    async def user(self, username: str) -> User:
        """Retrieve a user by username."""
        response = await self.transport.get(f"users/{_segment(username)}", UserResponse)
        return response.user


def create_client(registry_settings: RegistrySettings | None = None) -> AsyncClient:
    """Build a client from settings (REGISTRY_* environment variables).

    Raises:
        ConfigurationError: If no user agent is configured.
    """
    return AsyncClient.from_transport(create_transport(registry_settings))
