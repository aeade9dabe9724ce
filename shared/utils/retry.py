import asyncio
import logging
import random
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def retry_async(
    func: Callable[[], Awaitable[T]],
    retries: int = 5,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    jitter: float = 0.1,
    retry_on: Iterable[type[BaseException]] = (Exception,),
    on_retry: Optional[
        Callable[[int, BaseException, float], Awaitable[None] | None]
    ] = None,
) -> T:
    """Await ``func`` until it succeeds, backing off exponentially between tries.

    The last failure is re-raised once ``retries`` attempts are used up.
    ``on_retry(attempt, exc, sleep_for)`` may be sync or async.
    """
    if retries < 1:
        raise ValueError("retries must be >= 1")
    retry_on = tuple(retry_on)
    delay = base_delay
    for attempt in range(1, retries + 1):
        try:
            return await func()
        except retry_on as exc:  # type: ignore[misc]
            if attempt == retries:
                raise
            sleep_for = min(delay, max_delay) + random.uniform(0, delay * jitter)
            if on_retry:
                try:
                    result = on_retry(attempt, exc, sleep_for)
                    if result is not None:
                        await result
                except Exception:  # noqa: BLE001
                    logger.debug("on_retry callback failed", exc_info=True)
            await asyncio.sleep(sleep_for)
            delay = min(delay * 2, max_delay)
    raise RuntimeError("async retry exhausted")
