"""Toast dispatcher — fans a toast out to every configured channel."""

from __future__ import annotations

from collections import deque

import structlog

from src.monitor.channels import ToastChannel
from src.monitor.types import Toast

logger = structlog.get_logger(__name__)


class ToastDispatcher:
    """Routes toasts to channels.

    A failing channel is logged and skipped; it never prevents delivery
    to the remaining channels nor propagates to the caller.
    """

    def __init__(
        self,
        channels: list[ToastChannel] | None = None,
        history: int = 100,
    ) -> None:
        self._channels: list[ToastChannel] = channels or []
        self._sent: deque[Toast] = deque(maxlen=history)

    @property
    def channels(self) -> list[ToastChannel]:
        return list(self._channels)

    @property
    def sent(self) -> list[Toast]:
        """Most recent toasts dispatched, oldest first."""
        return list(self._sent)

    async def send(self, toast: Toast) -> None:
        self._sent.append(toast)
        for ch in self._channels:
            try:
                await ch.send(toast)
            except Exception:
                logger.exception(
                    "channel_dispatch_error",
                    channel=type(ch).__name__,
                    title=toast.title,
                )

    async def close(self) -> None:
        for ch in self._channels:
            try:
                await ch.close()
            except Exception:
                logger.exception("channel_close_error", channel=type(ch).__name__)
