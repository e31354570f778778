"""
release_orchestrator.services.release_service

Release lifecycle service.

Responsibilities:
- Own the resource client and the concurrency ceiling taken from settings.
- Record a deploy (release + per-service images) and log its outcome.
- Expose the status/timestamp updates used after the build completes.
"""

from __future__ import annotations

from typing import Any

from release_orchestrator.models.composition import Composition
from release_orchestrator.models.records import ImageModel, ImageUpdate, ReleaseModel, ReleaseUpdate
from release_orchestrator.observability.logging import deploy_context, get_logger
from release_orchestrator.orchestrator import release as release_ops
from release_orchestrator.orchestrator.release import ReleaseRequest, ReleaseResponse
from release_orchestrator.resources.client import ResourceClient
from release_orchestrator.settings import Settings

log = get_logger(__name__)


class ReleaseService:
    def __init__(self, *, settings: Settings, client: ResourceClient) -> None:
        self._settings = settings
        self._client = client

    async def create(
        self,
        *,
        user: int,
        application: int,
        composition: Composition | dict[str, Any],
        source: str,
        commit: str,
    ) -> ReleaseResponse:
        if not isinstance(composition, Composition):
            composition = Composition.model_validate(composition)

        req = ReleaseRequest(
            client=self._client,
            user=user,
            application=application,
            composition=composition,
            source=source,
            commit=commit,
        )
        with deploy_context(user_id=user, application_id=application, commit=commit):
            try:
                return await release_ops.create(
                    req, max_concurrency=self._settings.max_concurrent_requests
                )
            except Exception as e:
                # No rollback: anything created before the failure stays on the store.
                log.warning("release.failed", error=repr(e))
                raise

    async def update_release(self, id: int, **changes: Any) -> ReleaseModel:
        return await release_ops.update_release(self._client, id, ReleaseUpdate(**changes))

    async def update_image(self, id: int, **changes: Any) -> ImageModel:
        return await release_ops.update_image(self._client, id, ImageUpdate(**changes))


# --- Module Notes -----------------------------------------------------------
# Retrying is left to the caller; a retried `create` produces a new release but reuses
# existing service records.
