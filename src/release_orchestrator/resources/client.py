"""
release_orchestrator.resources.client

Client boundary for the remote resource store.

Responsibilities:
- Define the `ResourceClient` protocol the orchestrator is written against.
- Implement it over `httpx.AsyncClient` for the OData-style resource API.
- Build a configured client from `Settings`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from release_orchestrator.resources.errors import ObjectDoesNotExistError
from release_orchestrator.settings import Settings

Filter = Mapping[str, Any]


class ResourceClient(Protocol):
    async def create(self, resource: str, body: Mapping[str, Any]) -> dict[str, Any]: ...

    async def update(
        self, resource: str, id: int, body: Mapping[str, Any]
    ) -> dict[str, Any]: ...

    async def find(self, resource: str, filter: Filter) -> list[dict[str, Any]]: ...

    async def get(
        self, resource: str, id: int, expand: str | None = None
    ) -> dict[str, Any] | None: ...


class ResourceApiClient:
    """
    HTTP implementation of `ResourceClient`.

    Failed requests raise `httpx.HTTPStatusError`; classification into the semantic
    taxonomy happens in `resources.operations`.
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def create(self, resource: str, body: Mapping[str, Any]) -> dict[str, Any]:
        r = await self._http.post(resource, json=dict(body))
        r.raise_for_status()
        return r.json()

    async def update(self, resource: str, id: int, body: Mapping[str, Any]) -> dict[str, Any]:
        r = await self._http.patch(_entity_path(resource, id), json=dict(body))
        r.raise_for_status()
        # PATCH answers with an empty body; read the record back.
        record = await self.get(resource, id)
        if record is None:
            raise ObjectDoesNotExistError(f"{resource}({id}) not readable after update")
        return record

    async def find(self, resource: str, filter: Filter) -> list[dict[str, Any]]:
        params = {"$filter": build_filter(filter)} if filter else None
        r = await self._http.get(resource, params=params)
        r.raise_for_status()
        return list(r.json().get("d", []))

    async def get(
        self, resource: str, id: int, expand: str | None = None
    ) -> dict[str, Any] | None:
        params = {"$expand": expand} if expand else None
        r = await self._http.get(_entity_path(resource, id), params=params)
        r.raise_for_status()
        items = r.json().get("d", [])
        return items[0] if items else None

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ResourceApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_client(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> ResourceApiClient:
    headers = {"Authorization": settings.auth} if settings.auth else {}
    http = httpx.AsyncClient(
        base_url=settings.api_prefix,
        headers=headers,
        timeout=settings.request_timeout_s,
        transport=transport,
    )
    return ResourceApiClient(http=http)


def build_filter(filter: Filter) -> str:
    """
    Render an equality filter as an OData `$filter` expression.

    >>> build_filter({"application": 1, "service_name": "web"})
    "application eq 1 and service_name eq 'web'"
    """

    return " and ".join(f"{key} eq {_literal(value)}" for key, value in filter.items())


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def _entity_path(resource: str, id: int) -> str:
    return f"{resource}({id})"


# --- Module Notes -----------------------------------------------------------
# Only equality filters joined with `and` are rendered; `get_or_create` needs nothing more.
