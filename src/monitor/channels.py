"""Toast delivery channels — structured log and outbound webhook."""

from __future__ import annotations

import abc

import aiohttp
import structlog

from src.core.config import WebhookConfig
from src.monitor.types import Toast

logger = structlog.get_logger(__name__)

# Dedicated logger so toasts can be routed/collected separately.
toast_logger = structlog.get_logger("toast_log")


class ToastChannel(abc.ABC):
    """Base class for toast delivery channels."""

    @abc.abstractmethod
    async def send(self, toast: Toast) -> bool:
        """Deliver a toast. Returns True on success."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""


class LogToastChannel(ToastChannel):
    """Writes every toast to the ``toast_log`` logger."""

    async def send(self, toast: Toast) -> bool:
        toast_logger.warning(
            "toast",
            title=toast.title,
            description=toast.description,
            variant=toast.variant.value,
            alert_id=toast.alert_id,
            batch_sequence=toast.batch_sequence,
        )
        return True

    async def close(self) -> None:
        return None


class WebhookToastChannel(ToastChannel):
    """Posts toasts to a Slack/Discord-compatible incoming webhook."""

    def __init__(self, config: WebhookConfig) -> None:
        self._url = config.url.get_secret_value()
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def send(self, toast: Toast) -> bool:
        text = f"[{toast.title}] {toast.description}" if toast.description else f"[{toast.title}]"
        # "text" is read by Slack, "content" by Discord.
        payload = {"text": text, "content": text}

        try:
            session = self._get_session()
            async with session.post(self._url, json=payload) as resp:
                if resp.status in (200, 204):
                    return True
                body = await resp.text()
                logger.warning(
                    "webhook_send_failed",
                    status=resp.status,
                    body=body[:200],
                )
                return False
        except Exception:
            logger.exception("webhook_send_error")
            return False

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
