"""
release_orchestrator.orchestrator.release

Materializes a composition as release, service, image and metadata records.

Responsibilities:
- Validate that the acting user and application exist and are visible.
- Create the release, then per service: service (idempotent), image, release-image
  join, labels and environment variables.
- Provide the narrow update operations used by later pipeline stages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from release_orchestrator.models.composition import Composition, ServiceDescription
from release_orchestrator.models.records import (
    ApplicationModel,
    ImageAttributes,
    ImageEnvironmentVariableAttributes,
    ImageEnvironmentVariableModel,
    ImageLabelAttributes,
    ImageLabelModel,
    ImageModel,
    ImageUpdate,
    ReleaseAttributes,
    ReleaseImageAttributes,
    ReleaseImageModel,
    ReleaseModel,
    ReleaseUpdate,
    ServiceAttributes,
    ServiceModel,
    UserModel,
)
from release_orchestrator.observability.logging import get_logger
from release_orchestrator.orchestrator.concurrency import (
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    bounded_map,
    gather_settled,
)
from release_orchestrator.resources import operations
from release_orchestrator.resources.client import ResourceClient

log = get_logger(__name__)

RUNNING = "running"


@dataclass(slots=True)
class ReleaseRequest:
    # Authenticated client; the caller behind it must be `user` or a collaborator
    # of `user` on `application`, and must have read access to `application`.
    client: ResourceClient
    user: int
    application: int
    composition: Composition
    # Identifier for the deploy's origin, and the external identifier of the release.
    source: str
    commit: str


@dataclass(slots=True)
class ReleaseResponse:
    release: ReleaseModel
    service_images: dict[str, ImageModel] = field(default_factory=dict)


async def create(
    req: ReleaseRequest, *, max_concurrency: int = DEFAULT_MAX_CONCURRENT_REQUESTS
) -> ReleaseResponse:
    """
    Record a deploy of `req.composition`.

    Fails with the first error encountered. Records created before the failure are
    left on the store.
    """

    api = req.client

    user, application = await gather_settled(
        get_user(api, req.user),
        get_application(api, req.application),
    )

    release = await create_release(
        api,
        ReleaseAttributes(
            is_created_by__user=user.id,
            belongs_to__application=application.id,
            composition=req.composition.snapshot(),
            commit=req.commit,
            status=RUNNING,
            source=req.source,
            start_timestamp=_now(),
        ),
    )
    log.info(
        "release.created",
        release_id=release.id,
        application_id=application.id,
        services=len(req.composition.services),
    )

    res = ReleaseResponse(release=release)

    async def deploy_service(entry: tuple[str, ServiceDescription]) -> None:
        service_name, description = entry
        service = await get_or_create_service(
            api, ServiceAttributes(application=application.id, service_name=service_name)
        )
        image = await create_image(
            api,
            release.id,
            description.labels,
            description.environment,
            ImageAttributes(
                is_a_build_of__service=service.id,
                status=RUNNING,
                start_timestamp=_now(),
            ),
            max_concurrency=max_concurrency,
        )
        # Each task owns exactly one key.
        res.service_images[service_name] = image
        log.debug(
            "service.image_created",
            release_id=release.id,
            service=service_name,
            service_id=service.id,
            image_id=image.id,
        )

    await bounded_map(
        list(req.composition.services.items()),
        deploy_service,
        concurrency=max_concurrency,
    )

    log.info("release.completed", release_id=release.id, images=len(res.service_images))
    return res


async def update_release(
    api: ResourceClient, id: int, body: ReleaseUpdate
) -> ReleaseModel:
    record = await operations.update(api, "release", id, body.payload())
    return ReleaseModel.model_validate(record)


async def update_image(api: ResourceClient, id: int, body: ImageUpdate) -> ImageModel:
    record = await operations.update(api, "image", id, body.payload())
    return ImageModel.model_validate(record)


# --- Helpers -----------------------------------------------------------------


async def get_user(api: ResourceClient, id: int) -> UserModel:
    return UserModel.model_validate(await operations.get(api, "user", id))


async def get_application(api: ResourceClient, id: int) -> ApplicationModel:
    return ApplicationModel.model_validate(await operations.get(api, "application", id))


async def get_or_create_service(api: ResourceClient, body: ServiceAttributes) -> ServiceModel:
    record = await operations.get_or_create(
        api,
        "service",
        body.payload(),
        {"application": body.application, "service_name": body.service_name},
    )
    return ServiceModel.model_validate(record)


async def create_release(api: ResourceClient, body: ReleaseAttributes) -> ReleaseModel:
    return ReleaseModel.model_validate(await operations.create(api, "release", body.payload()))


async def create_image(
    api: ResourceClient,
    release: int,
    labels: Mapping[str, Any] | None,
    envvars: Mapping[str, Any] | None,
    body: ImageAttributes,
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENT_REQUESTS,
) -> ImageModel:
    image = ImageModel.model_validate(await operations.create(api, "image", body.payload()))

    release_image = ReleaseImageModel.model_validate(
        await operations.create(
            api,
            "image__is_part_of__release",
            ReleaseImageAttributes(is_part_of__release=release, image=image.id).payload(),
        )
    )

    async def create_label(entry: tuple[str, Any]) -> ImageLabelModel:
        name, value = entry
        record = await operations.create(
            api,
            "image_label",
            ImageLabelAttributes(
                release_image=release_image.id,
                label_name=name,
                value=stringify_or_empty(value),
            ).payload(),
        )
        return ImageLabelModel.model_validate(record)

    async def create_envvar(entry: tuple[str, Any]) -> ImageEnvironmentVariableModel:
        name, value = entry
        record = await operations.create(
            api,
            "image_environment_variable",
            ImageEnvironmentVariableAttributes(
                release_image=release_image.id,
                name=name,
                value=stringify_or_empty(value),
            ).payload(),
        )
        return ImageEnvironmentVariableModel.model_validate(record)

    await gather_settled(
        bounded_map(list((labels or {}).items()), create_label, concurrency=max_concurrency),
        bounded_map(list((envvars or {}).items()), create_envvar, concurrency=max_concurrency),
    )

    return image


def stringify_or_empty(value: Any) -> str:
    """
    Label and environment values are always stored as strings; falsy values
    (None, "", 0, False) become "".
    """

    if not value:
        return ""
    return str(value)


def _now() -> datetime:
    return datetime.now(tz=UTC)


# --- Module Notes -----------------------------------------------------------
# Release/image status and end timestamps are moved on by later pipeline stages via
# `update_release` / `update_image`; nothing here touches them after creation.
