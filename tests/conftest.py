"""Pytest configuration and fixtures shared across all test modules.

Provides a fake registry served through ``httpx.MockTransport``, a
deterministic clock for the rate gate, and payload builders shaped like the
registry's JSON.
"""

import os
from typing import Any, Callable

# Set before any import that might load settings
os.environ["REGISTRY_ENV"] = "testing"
os.environ.setdefault("REGISTRY_USER_AGENT", "registry-client-tests (tests@example.com)")

import httpx
import pytest

from registry_client.adapters.http.rate_gated import RateGatedTransport
from registry_client.adapters.rate_limit.in_memory import MinimumIntervalGate
from registry_client.client import AsyncClient

API_PREFIX = "/api/v1/"
TIMESTAMP = "2024-01-02T03:04:05.000000+00:00"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Deterministic monotonic clock; sleeping advances it."""

    def __init__(self, start: float = 0.0) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


class FakeRegistry:
    """Route table keyed by path relative to the API prefix.

    Each route maps to a handler ``request -> httpx.Response``. Every request
    is recorded so tests can count calls and inspect query parameters.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def add_json(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.add(path, lambda request: httpx.Response(status_code, json=payload))

    def paths(self) -> list[str]:
        return [self._relative(request) for request in self.requests]

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if self._relative(r) == path]

    @staticmethod
    def _relative(request: httpx.Request) -> str:
        path = request.url.path
        return path[len(API_PREFIX):] if path.startswith(API_PREFIX) else path

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(self._relative(request))
        if handler is None:
            return httpx.Response(404, json={"errors": [{"detail": "Not Found"}]})
        return handler(request)


def crate_payload(name: str, **overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "id": name,
        "name": name,
        "description": f"The {name} crate",
        "documentation": None,
        "homepage": None,
        "repository": f"https://github.com/example/{name}",
        "downloads": 1000,
        "recent_downloads": 10,
        "max_version": "1.0.0",
        "max_stable_version": "1.0.0",
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
        "links": {"owners": f"/api/v1/crates/{name}/owners"},
    }
    base.update(overrides)
    return base


def version_payload(version_id: int, crate: str, num: str, **overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "id": version_id,
        "crate": crate,
        "num": num,
        "dl_path": f"/api/v1/crates/{crate}/{num}/download",
        "readme_path": None,
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
        "downloads": 42,
        "features": {"default": ["std"]},
        "yanked": False,
        "license": "MIT OR Apache-2.0",
        "links": {
            "authors": f"/api/v1/crates/{crate}/{num}/authors",
            "dependencies": f"/api/v1/crates/{crate}/{num}/dependencies",
        },
    }
    base.update(overrides)
    return base


def dependency_payload(dep_id: int, version_id: int, crate_id: str) -> dict[str, Any]:
    return {
        "id": dep_id,
        "version_id": version_id,
        "crate_id": crate_id,
        "req": "^1",
        "optional": False,
        "default_features": True,
        "features": [],
        "target": None,
        "kind": "normal",
        "downloads": 5,
    }


def user_payload(user_id: int, login: str) -> dict[str, Any]:
    return {
        "id": user_id,
        "login": login,
        "name": login.title(),
        "avatar": None,
        "email": f"{login}@example.com",
        "url": f"https://github.com/{login}",
        "kind": "user",
    }


def reverse_dependencies_page(start: int, count: int, total: int) -> dict[str, Any]:
    """Build a reverse dependency page whose items are numbered from ``start``."""

    dependencies = []
    versions = []
    for offset in range(count):
        item = start + offset
        versions.append(version_payload(10_000 + item, f"dependent-{item}", "0.1.0"))
        dependencies.append(dependency_payload(item, 10_000 + item, "target"))
    return {"dependencies": dependencies, "versions": versions, "meta": {"total": total}}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def make_transport(registry: FakeRegistry, clock: FakeClock):
    """Factory for transports wired to the fake registry and clock."""

    def _make(min_interval: float = 1.0, user_agent: str = "tests (tests@example.com)"):
        gate = MinimumIntervalGate(min_interval=min_interval, clock=clock.time, sleep=clock.sleep)
        return RateGatedTransport(
            user_agent=user_agent,
            gate=gate,
            http_transport=httpx.MockTransport(registry),
        )

    return _make


@pytest.fixture
def make_client(make_transport):
    """Factory for clients wired to the fake registry and clock."""

    def _make(min_interval: float = 1.0) -> AsyncClient:
        return AsyncClient.from_transport(make_transport(min_interval))

    return _make
