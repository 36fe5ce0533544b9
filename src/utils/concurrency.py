"""Shared concurrency primitives for fan-out work.

**throttled_gather** is ``asyncio.gather`` with an optional semaphore around
each awaitable.  Without a semaphore the fan-out width equals the number of
awaitables; with one, at most ``semaphore`` slots run at a time.  Either way
results come back in input order, never in completion order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently and wait for all of them.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore bounding how many awaitables run at once.
        ``None`` means unbounded.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input awaitables.
    """
    if semaphore is None:
        return await asyncio.gather(*coros, return_exceptions=return_exceptions)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
