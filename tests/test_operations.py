"""
tests.test_operations

Call helpers and the idempotent `get_or_create` primitive.
"""

from __future__ import annotations

import pytest

from release_orchestrator.resources import operations
from release_orchestrator.resources.errors import (
    BadRequestError,
    ObjectDoesNotExistError,
    ServerError,
)

SERVICE = {"application": 1, "service_name": "web"}


@pytest.mark.asyncio
async def test_get_or_create_returns_created_record_without_querying(client, store) -> None:
    record = await operations.get_or_create(client, "service", SERVICE, SERVICE)

    assert record["service_name"] == "web"
    assert store.calls == [("create", "service")]


@pytest.mark.asyncio
async def test_get_or_create_falls_back_to_existing_record(client, store) -> None:
    existing = store.seed("service", **SERVICE)

    first = await operations.get_or_create(client, "service", SERVICE, SERVICE)
    second = await operations.get_or_create(client, "service", SERVICE, SERVICE)

    assert first == existing
    assert second == existing
    assert len(store.all("service")) == 1
    assert store.calls.count(("find", "service")) == 2


@pytest.mark.asyncio
async def test_get_or_create_returns_first_of_several_matches(client, store) -> None:
    store.fail("create", "service", 404)
    first = store.seed("service", **SERVICE)
    store.seed("service", **SERVICE)

    for _ in range(3):
        assert await operations.get_or_create(client, "service", SERVICE, SERVICE) == first


@pytest.mark.asyncio
async def test_get_or_create_raises_when_fallback_finds_nothing(client, store) -> None:
    store.seed("service", **SERVICE)
    store.hidden.add("service")

    with pytest.raises(ObjectDoesNotExistError):
        await operations.get_or_create(client, "service", SERVICE, SERVICE)


@pytest.mark.asyncio
@pytest.mark.parametrize(("code", "expected"), [(400, BadRequestError), (500, ServerError)])
async def test_get_or_create_propagates_other_errors(client, store, code, expected) -> None:
    store.fail("create", "service", code)

    with pytest.raises(expected):
        await operations.get_or_create(client, "service", SERVICE, SERVICE)
    assert ("find", "service") not in store.calls


@pytest.mark.asyncio
async def test_get_raises_when_record_is_missing(client) -> None:
    with pytest.raises(ObjectDoesNotExistError):
        await operations.get(client, "user", 42)


@pytest.mark.asyncio
async def test_unclassified_failures_propagate_unchanged(client, store) -> None:
    store.fail("create", "release", ConnectionResetError("reset by peer"))

    with pytest.raises(ConnectionResetError):
        await operations.create(client, "release", {"commit": "abc"})


@pytest.mark.asyncio
async def test_update_patches_record(client, store) -> None:
    release = store.seed("release", status="running")

    updated = await operations.update(client, "release", release["id"], {"status": "success"})

    assert updated["status"] == "success"
