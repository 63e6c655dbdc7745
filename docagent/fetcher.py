"""Bounded-concurrency retrieval of repository file contents."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from .filters import contains_secret
from .logging import get_logger
from .models import RepositoryFile

T = TypeVar("T")
R = TypeVar("R")

FetchResult = Tuple[str, Optional[str]]


async def map_with_concurrency(
    items: Sequence[T],
    limit: int,
    mapper: Callable[[T, int], Awaitable[R]],
) -> List[R]:
    """Apply ``mapper`` to every item with at most ``limit`` calls in flight.

    Workers pull the next index from a shared cursor and write results back by
    index, so the output keeps input order whatever the completion order.
    """
    if not items:
        return []

    worker_count = min(max(1, int(limit or 1)), len(items))
    results: List[Optional[R]] = [None] * len(items)
    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(items):
            # No await between the read and the increment: the claim is atomic on the event loop.
            index = cursor
            cursor += 1
            results[index] = await mapper(items[index], index)

    await asyncio.gather(*(worker() for _ in range(worker_count)))
    return results  # type: ignore[return-value]


async def fetch_all(
    paths: Sequence[str],
    limit: int,
    fetch_one: Callable[[str], Awaitable[str]],
    *,
    secret_check: Callable[[str], bool] = contains_secret,
    logger: logging.Logger | None = None,
) -> List[FetchResult]:
    """Fetch every candidate path, returning ``(path, content)`` pairs in input order.

    A failed fetch or a secret-flagged file yields ``None`` content for that
    path; neither stops the sibling fetches.
    """
    log = logger or get_logger("fetcher")

    async def load(path: str, _index: int) -> FetchResult:
        try:
            content = await fetch_one(path)
        except Exception as exc:
            log.warning("Skipping unreadable file %s: %s", path, exc)
            return path, None
        if secret_check(content):
            log.warning("Skipping file %s due to potential secret pattern", path)
            return path, None
        return path, content

    return await map_with_concurrency(paths, limit, load)


def collect_files(results: Sequence[FetchResult]) -> List[RepositoryFile]:
    """Drop empty slots and wrap the remaining contents."""
    return [RepositoryFile(path=path, content=content) for path, content in results if content is not None]


__all__ = ["FetchResult", "collect_files", "fetch_all", "map_with_concurrency"]
