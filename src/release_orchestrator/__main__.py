"""
release_orchestrator.__main__

Entrypoint for recording a deploy via `python -m release_orchestrator`.

Responsibilities:
- Load settings and configure logging.
- Read a normalized composition (JSON) and record the release.
- Print the created release and image ids as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import httpx

from release_orchestrator.models.composition import Composition
from release_orchestrator.observability.logging import configure_logging, get_logger
from release_orchestrator.resources.client import create_client
from release_orchestrator.resources.errors import ResourceError
from release_orchestrator.services.release_service import ReleaseService
from release_orchestrator.settings import Settings, get_settings

log = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release_orchestrator",
        description="Record a multi-service release on the resource store.",
    )
    parser.add_argument("composition", type=Path, help="normalized composition (JSON)")
    parser.add_argument("--user", type=int, required=True)
    parser.add_argument("--application", type=int, required=True)
    parser.add_argument("--commit", required=True)
    parser.add_argument("--source", default="cli")
    return parser


async def run(
    settings: Settings,
    args: argparse.Namespace,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    composition = Composition.model_validate_json(args.composition.read_text())

    async with create_client(settings, transport=transport) as client:
        service = ReleaseService(settings=settings, client=client)
        res = await service.create(
            user=args.user,
            application=args.application,
            composition=composition,
            source=args.source,
            commit=args.commit,
        )

    return {
        "release": res.release.id,
        "images": {name: image.id for name, image in res.service_images.items()},
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    try:
        out = asyncio.run(run(settings, args))
    except ResourceError as e:
        log.error("cli.failed", error=repr(e), status_code=e.status_code)
        return 1

    print(json.dumps(out))
    return 0


if __name__ == "__main__":
    sys.exit(main())
