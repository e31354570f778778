"""
tests.conftest

Shared fakes for the resource store.

Responsibilities:
- `MemoryStore`: in-memory records with the store's uniqueness and error behaviour.
- `MemoryResourceClient`: `ResourceClient` implementation backed by a `MemoryStore`.
- `create_store_app`: FastAPI app exposing a `MemoryStore` over the OData-style API,
  used to exercise the real HTTP client through `httpx.ASGITransport`.
"""

from __future__ import annotations

import asyncio
import itertools
import re
from collections import defaultdict
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from release_orchestrator.settings import Settings

# Resources the store keeps unique, and the attributes that identify a record.
UNIQUE_KEYS: dict[str, tuple[str, ...]] = {"service": ("application", "service_name")}

_ENTITY = re.compile(r"^(\w+)\((\d+)\)$")


class StoreError(Exception):
    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code


class MemoryStore:
    def __init__(self) -> None:
        self.records: dict[str, dict[int, dict[str, Any]]] = defaultdict(dict)
        self._ids = itertools.count(1)
        self._failures: dict[tuple[str, str], Exception] = {}
        # Resources whose records `find` cannot see (permission boundary).
        self.hidden: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def seed(self, resource: str, **attrs: Any) -> dict[str, Any]:
        record = {"id": next(self._ids), **attrs}
        self.records[resource][record["id"]] = record
        return dict(record)

    def fail(self, op: str, resource: str, exc: Exception | int) -> None:
        self._failures[(op, resource)] = StoreError(exc) if isinstance(exc, int) else exc

    def all(self, resource: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self.records[resource].values()]

    def _enter(self, op: str, resource: str) -> None:
        self.calls.append((op, resource))
        exc = self._failures.get((op, resource))
        if exc is not None:
            raise exc

    def create(self, resource: str, body: dict[str, Any]) -> dict[str, Any]:
        self._enter("create", resource)
        keys = UNIQUE_KEYS.get(resource)
        if keys and any(
            all(r.get(k) == body.get(k) for k in keys) for r in self.records[resource].values()
        ):
            # The store reports uniqueness violations as "not found".
            raise StoreError(404, f"{resource} already exists")
        return self.seed(resource, **body)

    def update(self, resource: str, id: int, body: dict[str, Any]) -> dict[str, Any]:
        self._enter("update", resource)
        record = self.records[resource].get(id)
        if record is None:
            raise StoreError(404)
        record.update(body)
        return dict(record)

    def find(self, resource: str, filter: dict[str, Any]) -> list[dict[str, Any]]:
        self._enter("find", resource)
        if resource in self.hidden:
            return []
        return [
            dict(r)
            for r in self.records[resource].values()
            if all(r.get(k) == v for k, v in filter.items())
        ]

    def get(self, resource: str, id: int) -> dict[str, Any] | None:
        self._enter("get", resource)
        record = self.records[resource].get(id)
        return dict(record) if record is not None else None


class MemoryResourceClient:
    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    async def create(self, resource: str, body: dict[str, Any]) -> dict[str, Any]:
        await asyncio.sleep(0)
        return self.store.create(resource, dict(body))

    async def update(self, resource: str, id: int, body: dict[str, Any]) -> dict[str, Any]:
        await asyncio.sleep(0)
        return self.store.update(resource, id, dict(body))

    async def find(self, resource: str, filter: dict[str, Any]) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        return self.store.find(resource, dict(filter))

    async def get(
        self, resource: str, id: int, expand: str | None = None
    ) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        return self.store.get(resource, id)


def _parse_literal(raw: str) -> Any:
    if raw.startswith("'") and raw.endswith("'"):
        return raw[1:-1].replace("''", "'")
    if raw == "null":
        return None
    if raw in ("true", "false"):
        return raw == "true"
    return int(raw)


def parse_filter(expr: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for clause in filter(None, expr.split(" and ")):
        key, _, raw = clause.partition(" eq ")
        out[key.strip()] = _parse_literal(raw.strip())
    return out


def create_store_app(store: MemoryStore, *, auth: str | None = None) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def check_auth(request: Request, call_next):
        if auth is not None and request.headers.get("authorization") != auth:
            return JSONResponse(status_code=401, content={"detail": "unauthorised"})
        return await call_next(request)

    @app.exception_handler(StoreError)
    async def store_error(_: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.post("/v6/{resource}")
    async def create(resource: str, request: Request) -> JSONResponse:
        record = store.create(resource, await request.json())
        return JSONResponse(status_code=201, content=record)

    @app.get("/v6/{target}")
    async def read(target: str, request: Request) -> dict[str, Any]:
        m = _ENTITY.match(target)
        if m:
            record = store.get(m.group(1), int(m.group(2)))
            return {"d": [record] if record is not None else []}
        return {"d": store.find(target, parse_filter(request.query_params.get("$filter", "")))}

    @app.patch("/v6/{target}")
    async def patch(target: str, request: Request) -> Response:
        m = _ENTITY.match(target)
        if not m:
            raise StoreError(400, "PATCH requires an entity path")
        store.update(m.group(1), int(m.group(2)), await request.json())
        return Response(status_code=200)

    return app


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(store: MemoryStore) -> MemoryResourceClient:
    return MemoryResourceClient(store)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        env="test",
        api_endpoint="http://store.test",
        auth="Bearer test-token",
        max_concurrent_requests=5,
    )


# --- Module Notes -----------------------------------------------------------
# `MemoryStore.fail(op, resource, status)` injects failures; `hidden` emulates records
# that exist but are not readable by the caller.
