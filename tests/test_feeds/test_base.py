"""Tests for BasePoller — lifecycle, update callbacks, fail-open polling."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

from src.api.exceptions import FetchError
from src.feeds.base import BasePoller


class StubPoller(BasePoller[int]):
    """Concrete BasePoller for testing."""

    def __init__(
        self,
        results: list[int] | None = None,
        error: Exception | None = None,
        fallback_value: int | None = -1,
        poll_interval_secs: float = 0.03,
    ) -> None:
        super().__init__(name="stub", poll_interval_secs=poll_interval_secs)
        self._results = list(results or [])
        self._error = error
        self._fallback_value = fallback_value
        self.fetch_calls = 0

    async def fetch(self) -> int:
        self.fetch_calls += 1
        if self._error is not None:
            raise self._error
        if self._results:
            return self._results.pop(0)
        return 0

    def fallback(self, exc: Exception) -> int | None:
        return self._fallback_value


class TestBasePollerLifecycle:
    async def test_start_sets_running(self) -> None:
        poller = StubPoller()
        await poller.start()
        assert poller.running
        await poller.stop()
        assert not poller.running

    async def test_start_is_idempotent(self) -> None:
        poller = StubPoller()
        await poller.start()
        task1 = poller._task
        await poller.start()  # should be no-op
        assert poller._task is task1
        await poller.stop()

    async def test_stop_cancels_task(self) -> None:
        poller = StubPoller()
        await poller.start()
        task = poller._task
        await poller.stop()
        assert task is not None and task.done()
        assert poller._task is None

    async def test_no_polls_after_stop(self) -> None:
        poller = StubPoller(poll_interval_secs=0.01)
        await poller.start()
        await asyncio.sleep(0.05)
        await poller.stop()
        calls = poller.fetch_calls
        await asyncio.sleep(0.05)
        assert poller.fetch_calls == calls

    async def test_async_context_manager(self) -> None:
        poller = StubPoller()
        async with poller:
            assert poller.running
        assert not poller.running

    async def test_latest_none_before_first_poll(self) -> None:
        assert StubPoller().latest is None


class TestBasePollerUpdates:
    async def test_poll_once_publishes(self) -> None:
        poller = StubPoller(results=[7])
        received: list[int] = []
        poller.on_update(received.append)  # type: ignore[arg-type]
        assert await poller.poll_once() == 7
        assert received == [7]
        assert poller.latest == 7
        assert poller.last_poll_time > 0

    async def test_loop_polls_repeatedly(self) -> None:
        poller = StubPoller(results=[1, 2, 3], poll_interval_secs=0.01)
        received: list[int] = []
        poller.on_update(received.append)  # type: ignore[arg-type]
        async with poller:
            await asyncio.sleep(0.1)
        assert received[:3] == [1, 2, 3]

    async def test_async_callback(self) -> None:
        poller = StubPoller(results=[1])
        cb = AsyncMock()
        poller.on_update(cb)
        await poller.poll_once()
        cb.assert_awaited_once_with(1)

    async def test_callback_error_does_not_stop_others(self) -> None:
        poller = StubPoller(results=[1])

        def _boom(value: int) -> None:
            raise RuntimeError("callback failed")

        received: list[int] = []
        poller.on_update(_boom)
        poller.on_update(received.append)  # type: ignore[arg-type]
        await poller.poll_once()
        assert received == [1]


class TestBasePollerFailures:
    async def test_fetch_error_publishes_fallback(self) -> None:
        poller = StubPoller(error=FetchError("down"), fallback_value=-1)
        received: list[int] = []
        poller.on_update(received.append)  # type: ignore[arg-type]
        assert await poller.poll_once() == -1
        assert received == [-1]
        assert poller.error_count == 1

    async def test_unexpected_error_also_absorbed(self) -> None:
        poller = StubPoller(error=RuntimeError("bug"))
        assert await poller.poll_once() == -1
        assert poller.error_count == 1

    async def test_none_fallback_keeps_previous(self) -> None:
        poller = StubPoller(results=[5], fallback_value=None)
        await poller.poll_once()
        poller._error = FetchError("down")
        received: list[int] = []
        poller.on_update(received.append)  # type: ignore[arg-type]
        assert await poller.poll_once() == 5
        assert received == []
        assert poller.latest == 5

    async def test_loop_survives_errors(self) -> None:
        poller = StubPoller(error=FetchError("down"), poll_interval_secs=0.01)
        async with poller:
            await asyncio.sleep(0.08)
        assert poller.error_count >= 2
        assert poller.poll_count >= 2
