import asyncio
from typing import Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """Run a blocking store call in the default executor.

    The ClickHouse client is synchronous; every call from the event loop goes
    through here so both refresh fetches can be in flight at once.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
