"""
release_orchestrator.resources.operations

Call helpers over a `ResourceClient`.

Responsibilities:
- Run every store call through `classify_response_error`.
- Provide the idempotent `get_or_create` primitive.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from release_orchestrator.observability.logging import get_logger
from release_orchestrator.resources.client import Filter, ResourceClient
from release_orchestrator.resources.errors import (
    ObjectDoesNotExistError,
    classify_response_error,
)

log = get_logger(__name__)


@contextmanager
def _classified() -> Iterator[None]:
    try:
        yield
    except Exception as e:
        err = classify_response_error(e)
        if err is e:
            raise
        raise err from e


async def create(
    client: ResourceClient, resource: str, body: Mapping[str, Any]
) -> dict[str, Any]:
    with _classified():
        return await client.create(resource, body)


async def update(
    client: ResourceClient, resource: str, id: int, body: Mapping[str, Any]
) -> dict[str, Any]:
    with _classified():
        return await client.update(resource, id, body)


async def find(client: ResourceClient, resource: str, filter: Filter) -> list[dict[str, Any]]:
    with _classified():
        return await client.find(resource, filter)


async def get(
    client: ResourceClient, resource: str, id: int, expand: str | None = None
) -> dict[str, Any]:
    with _classified():
        record = await client.get(resource, id, expand)
    if record is None:
        raise ObjectDoesNotExistError(f"{resource}({id}) not found")
    return record


async def get_or_create(
    client: ResourceClient,
    resource: str,
    body: Mapping[str, Any],
    filter: Filter,
) -> dict[str, Any]:
    """
    Create a record, or return the existing one matching `filter`.

    The store rejects a duplicate creation with a 404, so `ObjectDoesNotExistError` on
    create triggers a lookup by `filter`. The first match wins; no match re-raises
    `ObjectDoesNotExistError` (the record exists but is not readable by this caller).
    """

    try:
        return await create(client, resource, body)
    except ObjectDoesNotExistError:
        log.debug("resource.get_or_create.fallback", resource=resource, filter=dict(filter))

    existing = await find(client, resource, filter)
    if existing:
        return existing[0]
    raise ObjectDoesNotExistError(f"{resource} matching {dict(filter)!r} not found")


# --- Module Notes -----------------------------------------------------------
# `get_or_create` is the only place in the package that recovers from a store error.
