"""
release_orchestrator.orchestrator.concurrency

Bounded-concurrency fan-out for independent async work.

Responsibilities:
- Run a coroutine per item with at most `concurrency` in flight.
- Stop scheduling new items after the first failure and surface it.
- Join a fixed set of awaitables without leaving any of them running on failure.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from release_orchestrator.observability.logging import get_logger

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_CONCURRENT_REQUESTS = 5

log = get_logger(__name__)


async def bounded_map(
    items: Iterable[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    concurrency: int = DEFAULT_MAX_CONCURRENT_REQUESTS,
) -> list[R]:
    """
    Apply `fn` to every item with at most `concurrency` calls in flight.

    Results come back in completion order; callers that need to know which item
    produced a result should close over the item inside `fn`.

    On the first failure no further items are started. Calls already in flight are
    not cancelled: they run to completion, then the first failure is raised. There
    is no rollback of work that already succeeded.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    pending_items = iter(items)
    results: list[R] = []
    errors: list[BaseException] = []

    async def worker() -> None:
        # Workers share one iterator; a failure anywhere stops every worker from
        # pulling the next item.
        for item in pending_items:
            if errors:
                return
            try:
                results.append(await fn(item))
            except Exception as e:
                if not errors:
                    log.debug("bounded_map.item_failed", error=repr(e))
                errors.append(e)
                return

    await asyncio.gather(*(worker() for _ in range(concurrency)))

    if errors:
        raise errors[0]
    return results


async def gather_settled(*aws: Awaitable[Any]) -> list[Any]:
    """
    Like `asyncio.gather`, but waits for every awaitable to settle before raising
    the first failure, so nothing is left running after the caller sees the error.
    """

    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes


# --- Module Notes -----------------------------------------------------------
# Nested calls (services → labels/env vars) each get their own ceiling; the total
# number of in-flight calls across nesting levels is not capped.
