"""Tests for reverse dependency paging and accumulation."""

import httpx
import pytest

from conftest import FakeRegistry, dependency_payload, reverse_dependencies_page, version_payload
from registry_client.services.reverse_dependencies import ReverseDependencyPager

PATH = "crates/target/reverse_dependencies"


def _serve(registry: FakeRegistry, pages: dict[int, dict]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        payload = pages.get(page, {"dependencies": [], "versions": [], "meta": {"total": 0}})
        return httpx.Response(200, json=payload)

    registry.add(PATH, handler)


@pytest.mark.asyncio
async def test_accumulates_until_empty_page(registry: FakeRegistry, make_transport) -> None:
    _serve(
        registry,
        {
            1: reverse_dependencies_page(0, 100, total=200),
            2: reverse_dependencies_page(100, 100, total=200),
        },
    )
    pager = ReverseDependencyPager(make_transport())

    deps = await pager.all("target")

    assert len(deps.dependencies) == 200
    assert deps.meta.total == 200
    assert len(registry.requests) == 3
    assert [d.dependency.id for d in deps.dependencies] == list(range(200))
    assert [r.url.params["page"] for r in registry.requests] == ["1", "2", "3"]
    assert all(r.url.params["per_page"] == "100" for r in registry.requests)


@pytest.mark.asyncio
async def test_total_comes_from_last_non_empty_page(registry: FakeRegistry, make_transport) -> None:
    _serve(
        registry,
        {
            1: reverse_dependencies_page(0, 100, total=150),
            2: reverse_dependencies_page(100, 30, total=130),
        },
    )
    pager = ReverseDependencyPager(make_transport())

    deps = await pager.all("target")

    assert len(deps.dependencies) == 130
    assert deps.meta.total == 130


@pytest.mark.asyncio
async def test_no_reverse_dependencies_costs_one_request(
    registry: FakeRegistry, make_transport
) -> None:
    _serve(registry, {})
    pager = ReverseDependencyPager(make_transport())

    deps = await pager.all("target")

    assert deps.dependencies == []
    assert deps.meta.total == 0
    assert len(registry.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [0, -3])
async def test_page_below_one_is_read_as_one(
    registry: FakeRegistry, make_transport, page: int
) -> None:
    _serve(registry, {1: reverse_dependencies_page(0, 3, total=3)})
    pager = ReverseDependencyPager(make_transport())

    clamped = await pager.page("target", page)
    first = await pager.page("target", 1)

    assert clamped == first
    assert [r.url.params["page"] for r in registry.requests] == ["1", "1"]


@pytest.mark.asyncio
async def test_page_joins_dependencies_with_versions(
    registry: FakeRegistry, make_transport
) -> None:
    registry.add_json(
        PATH,
        {
            "dependencies": [
                dependency_payload(1, 501, "target"),
                dependency_payload(2, 502, "target"),
            ],
            "versions": [
                version_payload(502, "beta", "2.0.0"),
                version_payload(501, "alpha", "1.0.0"),
            ],
            "meta": {"total": 2},
        },
    )
    pager = ReverseDependencyPager(make_transport())

    deps = await pager.page("target", 1)

    assert [(d.crate_version.crate_name, d.dependency.id) for d in deps.dependencies] == [
        ("alpha", 1),
        ("beta", 2),
    ]
    assert deps.meta.total == 2


@pytest.mark.asyncio
async def test_count_reads_total_from_first_page(registry: FakeRegistry, make_transport) -> None:
    _serve(registry, {1: reverse_dependencies_page(0, 100, total=1234)})
    pager = ReverseDependencyPager(make_transport())

    assert await pager.count("target") == 1234
    assert len(registry.requests) == 1


@pytest.mark.asyncio
async def test_max_pages_bounds_requests(registry: FakeRegistry, make_transport) -> None:
    def never_empty(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        return httpx.Response(200, json=reverse_dependencies_page(page * 100, 100, total=10_000))

    registry.add(PATH, never_empty)
    pager = ReverseDependencyPager(make_transport())

    deps = await pager.all("target", max_pages=3)

    assert len(registry.requests) == 3
    assert len(deps.dependencies) == 300


@pytest.mark.asyncio
@pytest.mark.parametrize("max_pages", [0, -1])
async def test_max_pages_below_one_rejected(
    registry: FakeRegistry, make_transport, max_pages: int
) -> None:
    pager = ReverseDependencyPager(make_transport())

    with pytest.raises(ValueError):
        await pager.all("target", max_pages=max_pages)

    assert registry.requests == []
