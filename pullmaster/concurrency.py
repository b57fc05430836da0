"""Fail-fast fan-out helper for asyncio."""

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """
    Run awaitables concurrently and return their results in argument order.

    On the first failure (or if the caller is cancelled) every sibling that
    is still running is cancelled and drained before the error is re-raised,
    so abandoned tasks never surface unretrieved exceptions later.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
