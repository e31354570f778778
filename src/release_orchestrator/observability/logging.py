"""
release_orchestrator.observability.logging

structlog setup for the orchestrator.

Responsibilities:
- Render orchestration events (`release.created`, `release.failed`, ...) as JSON lines.
- Scope deploy identifiers (user, application, commit) to every event of one deploy.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def configure_logging(*, service_name: str, level: str) -> None:
    """
    Entrypoints call this once; library use leaves structlog's defaults alone.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            # Deploy identifiers bound by `deploy_context` land on every event.
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _tag_origin(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _tag_origin(service_name: str):
    # `service` already names the composition service on per-image events, so the
    # emitting process goes under `origin`.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("origin", service_name)
        return event_dict

    return processor


@contextmanager
def deploy_context(*, user_id: int, application_id: int, commit: str) -> Iterator[None]:
    """
    Bind the identifiers of one deploy for the duration of the block.

    Tasks spawned inside the block inherit the binding (contextvars are copied into
    new asyncio tasks), so concurrent per-service events carry it as well.
    """

    with structlog.contextvars.bound_contextvars(
        user_id=user_id, application_id=application_id, commit=commit
    ):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
