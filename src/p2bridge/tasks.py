"""Bounded parallel fan-out for independent per-item work.

Site loading, artifact downloads, and deployments are independent per item.
``run_parallel`` runs one coroutine per item with at most ``limit`` in
flight. There is no completion-order guarantee. The first failure aborts
the batch: items still waiting for a slot are skipped, items already in
flight are allowed to finish with their results discarded, and the first
error observed is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_SKIPPED = object()


async def run_parallel(
    items: Iterable[T],
    task: Callable[[T], Awaitable[R]],
    *,
    limit: int = 8,
) -> list[R]:
    """Run ``task`` for every item with bounded concurrency.

    Args:
        items: Items to process.
        task: Coroutine function applied to each item.
        limit: Maximum number of concurrently running tasks.

    Returns:
        Results in completion order.

    Raises:
        Exception: The first exception raised by any task.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    semaphore = asyncio.Semaphore(limit)
    aborted = asyncio.Event()

    async def _bounded(item: T) -> R | object:
        async with semaphore:
            # Set before the slot is released, so queued items see it.
            if aborted.is_set():
                return _SKIPPED
            try:
                return await task(item)
            except Exception:
                aborted.set()
                raise

    futures = [asyncio.ensure_future(_bounded(item)) for item in items]
    results: list[R] = []
    first_error: BaseException | None = None
    for next_done in asyncio.as_completed(futures):
        try:
            result = await next_done
        except Exception as exc:
            if first_error is None:
                first_error = exc
            else:
                logger.debug("Discarding further error: %s", exc)
            continue
        if first_error is None and result is not _SKIPPED:
            results.append(result)  # type: ignore[arg-type]

    if first_error is not None:
        raise first_error
    return results
