"""Async utilities for bridging blocking HTTP calls into the sync engine."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    The sync engine awaits every CMS call through this helper, one at a
    time, so the blocking ``requests``-based client never stalls the loop.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        client = StrapiClient(config)
        entry = await run_sync(client.find_by_slug, "blog-posts", "hello", "en")
    """
    return await asyncio.to_thread(func, *args, **kwargs)
