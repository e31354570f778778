"""
release_orchestrator.models.records

Resource store record shapes.

Responsibilities:
- `*Attributes`: creation payloads, including relation ids.
- `*Model`: records as fetched (always carry `id`; unknown fields are kept).
- `*Update`: partial payloads for the supporting update operations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int


class _Attributes(BaseModel):
    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# --- Creation payloads --------------------------------------------------------


class ServiceAttributes(_Attributes):
    application: int
    service_name: str


class ReleaseAttributes(_Attributes):
    is_created_by__user: int
    belongs_to__application: int
    composition: dict[str, Any]
    commit: str
    status: str
    source: str
    start_timestamp: datetime
    end_timestamp: datetime | None = None


class ImageAttributes(_Attributes):
    is_a_build_of__service: int
    status: str
    start_timestamp: datetime
    end_timestamp: datetime | None = None
    dockerfile: str | None = None
    image_size: int | None = None
    project_type: str | None = None
    error_message: str | None = None
    build_log: str | None = None
    push_timestamp: datetime | None = None
    content_hash: str | None = None


class ReleaseImageAttributes(_Attributes):
    is_part_of__release: int
    image: int


class ImageLabelAttributes(_Attributes):
    release_image: int
    label_name: str
    value: str


class ImageEnvironmentVariableAttributes(_Attributes):
    release_image: int
    name: str
    value: str


# --- Fetched records ----------------------------------------------------------


class UserModel(_Record):
    pass


class ApplicationModel(_Record):
    pass


class ServiceModel(_Record):
    service_name: str


class ReleaseModel(_Record):
    commit: str
    status: str
    source: str
    composition: dict[str, Any] | None = None
    start_timestamp: datetime | None = None
    end_timestamp: datetime | None = None


class ImageModel(_Record):
    status: str
    start_timestamp: datetime | None = None
    end_timestamp: datetime | None = None
    dockerfile: str | None = None
    image_size: int | None = None
    project_type: str | None = None
    error_message: str | None = None
    build_log: str | None = None
    push_timestamp: datetime | None = None
    content_hash: str | None = None
    # Assigned by the store; only available on fetched records.
    is_stored_at__image_location: str | None = None


class ReleaseImageModel(_Record):
    pass


class ImageLabelModel(_Record):
    label_name: str
    value: str


class ImageEnvironmentVariableModel(_Record):
    name: str
    value: str


# --- Partial updates ----------------------------------------------------------


class _Update(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def payload(self) -> dict[str, Any]:
        # Only fields the caller set explicitly are patched (an explicit None clears).
        return self.model_dump(mode="json", exclude_unset=True)


class ReleaseUpdate(_Update):
    composition: dict[str, Any] | None = None
    commit: str | None = None
    status: str | None = None
    source: str | None = None
    start_timestamp: datetime | None = None
    end_timestamp: datetime | None = None


class ImageUpdate(_Update):
    status: str | None = None
    start_timestamp: datetime | None = None
    end_timestamp: datetime | None = None
    dockerfile: str | None = None
    image_size: int | None = None
    project_type: str | None = None
    error_message: str | None = None
    build_log: str | None = None
    push_timestamp: datetime | None = None
    content_hash: str | None = None


# --- Module Notes -----------------------------------------------------------
# Field names follow the store's resource model verbatim (including the `__` relation
# names), so payloads need no aliasing.
