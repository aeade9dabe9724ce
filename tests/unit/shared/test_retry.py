from unittest.mock import AsyncMock, patch

import pytest

from shared.utils.retry import retry_async


@pytest.mark.asyncio
async def test_retry_async_eventually_succeeds():
    calls = {"n": 0}
    seen = []

    async def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise ConnectionError("not yet")
        return "connected"

    def on_retry(attempt, exc, sleep_for):
        seen.append((attempt, str(exc)))

    with patch("shared.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        result = await retry_async(flaky, retries=5, on_retry=on_retry)

    assert result == "connected"
    assert seen == [(1, "not yet"), (2, "not yet")]
    assert mock_sleep.await_count == 2


@pytest.mark.asyncio
async def test_retry_async_reraises_after_last_attempt():
    async def always_down():
        raise ConnectionError("down")

    with patch("shared.utils.retry.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(ConnectionError):
            await retry_async(always_down, retries=3)


@pytest.mark.asyncio
async def test_retry_async_does_not_retry_other_errors():
    func = AsyncMock(side_effect=KeyError("x"))

    with pytest.raises(KeyError):
        await retry_async(func, retries=3, retry_on=(ConnectionError,))

    assert func.await_count == 1


@pytest.mark.asyncio
async def test_retry_async_survives_failing_callback():
    func = AsyncMock(side_effect=[ConnectionError("once"), "ok"])

    def bad_callback(attempt, exc, sleep_for):
        raise RuntimeError("callback bug")

    with patch("shared.utils.retry.asyncio.sleep", new=AsyncMock()):
        assert await retry_async(func, retries=2, on_retry=bad_callback) == "ok"
