"""
release_orchestrator.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the resource client and the orchestrator.
- Hide the API credential from repr/logging.
- Offer a cached settings instance for entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RELEASE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "release-orchestrator"
    log_level: str = "INFO"

    # Resource API. Requests go to `{api_endpoint}/{api_version}/`.
    api_endpoint: str = "https://api.balena-cloud.com"
    api_version: str = "v6"
    # Forwarded verbatim as the Authorization header, eg. `Bearer <token>`.
    auth: str = Field(default="", repr=False)
    request_timeout_s: float = 30.0

    # Ceiling applied to every batch of concurrent creations.
    max_concurrent_requests: int = Field(default=5, ge=1)

    @property
    def api_prefix(self) -> str:
        return f"{self.api_endpoint.rstrip('/')}/{self.api_version}/"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Library callers can build `Settings(...)` directly; only the CLI entrypoint relies on
# the cached env-driven instance.
