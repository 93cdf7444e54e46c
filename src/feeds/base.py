"""Abstract base poller — fixed-interval loop, update callbacks, lifecycle."""

from __future__ import annotations

import abc
import asyncio
import time
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Generic, TypeVar

import structlog

from src.api.exceptions import ApiError
from src.core.logging import poller_context

logger = structlog.stdlib.get_logger()

T = TypeVar("T")

# Type alias for snapshot-update callbacks
PollCallback = Callable[[T], Awaitable[None] | None]


class BasePoller(abc.ABC, Generic[T]):
    """Abstract base class for endpoint pollers.

    Subclasses implement ``fetch()`` and ``fallback()``; the base class
    owns the background task, publishes each new snapshot to callbacks,
    and cancels the task on teardown. A failed fetch is never retried
    early; the loop simply waits for the next tick.

    Usage::

        poller = MyPoller(client, poll_interval_secs=60)
        poller.on_update(my_callback)
        async with poller:
            await asyncio.sleep(300)
    """

    def __init__(self, name: str, poll_interval_secs: float = 60.0) -> None:
        self._name = name
        self._poll_interval_secs = poll_interval_secs
        self._callbacks: list[PollCallback[T]] = []
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._error_count = 0
        self._poll_count = 0
        self._last_poll_time: float = 0.0
        self._latest: T | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def running(self) -> bool:
        return self._running

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def poll_count(self) -> int:
        return self._poll_count

    @property
    def last_poll_time(self) -> float:
        return self._last_poll_time

    @property
    def latest(self) -> T | None:
        """Most recently published snapshot, or None before the first poll."""
        return self._latest

    def on_update(self, callback: PollCallback[T]) -> None:
        """Register a callback invoked with every published snapshot."""
        self._callbacks.append(callback)

    async def _emit(self, snapshot: T) -> None:
        for cb in self._callbacks:
            try:
                result = cb(snapshot)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("poll_callback_error", poller=self._name)

    @abc.abstractmethod
    async def fetch(self) -> T:
        """Fetch a fresh snapshot; raise on any failure."""

    @abc.abstractmethod
    def fallback(self, exc: Exception) -> T | None:
        """Snapshot to publish after a failed fetch.

        Returning None keeps the previous snapshot unpublished and unchanged.
        """

    async def poll_once(self) -> T | None:
        """Run one fetch cycle and publish its result.

        Failures are absorbed here: the fallback snapshot (if any) is
        published instead, so callers never see a transport error.
        """
        self._poll_count += 1
        try:
            snapshot = await self.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._error_count += 1
            if isinstance(exc, ApiError):
                logger.warning(
                    "poll_fetch_failed",
                    poller=self._name,
                    error=str(exc),
                    error_count=self._error_count,
                )
            else:
                logger.exception(
                    "poll_error",
                    poller=self._name,
                    error_count=self._error_count,
                )
            fallback = self.fallback(exc)
            if fallback is None:
                return self._latest
            snapshot = fallback

        self._latest = snapshot
        self._last_poll_time = time.time()
        await self._emit(snapshot)
        return snapshot

    async def start(self) -> None:
        """Start the background poll loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(
            "poller_started",
            poller=self._name,
            poll_interval_secs=self._poll_interval_secs,
        )

    async def stop(self) -> None:
        """Stop the poll loop; any in-flight request is cancelled with it."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("poller_stopped", poller=self._name)

    async def _poll_loop(self) -> None:
        """Background loop that calls poll_once() at the configured interval."""
        with poller_context(self._name):
            await self._run_ticks()

    async def _run_ticks(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break

            try:
                await asyncio.sleep(self._poll_interval_secs)
            except asyncio.CancelledError:
                break

    async def __aenter__(self) -> BasePoller[T]:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()
