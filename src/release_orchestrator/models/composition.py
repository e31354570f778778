"""
release_orchestrator.models.composition

Normalized composition accepted by the orchestrator.

The composition is produced by an upstream compose parser; only the parts the
orchestrator reads are typed here, everything else is carried through untouched
so it can be stored verbatim on the release.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceDescription(BaseModel):
    model_config = ConfigDict(extra="allow")

    labels: dict[str, Any] | None = None
    environment: dict[str, Any] | None = None


class Composition(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str | None = None
    services: dict[str, ServiceDescription] = Field(default_factory=dict)

    def snapshot(self) -> dict[str, Any]:
        # JSON-ready copy stored on the release record.
        return self.model_dump(mode="json", exclude_unset=True)
