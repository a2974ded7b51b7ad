"""Webhook delivery over HTTP.

The blocking `requests` call is run in a thread by `send_webhook`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import requests

from . import config

__all__ = ["SendWebhookSync", "WebhookError", "send_webhook", "send_webhook_sync"]

logger = logging.getLogger(__name__)

_USER_AGENT = "alertmanager-notifier/1.0"


class WebhookError(RuntimeError):
    """Delivery of a webhook failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class SendWebhookSync:
    url: str
    body: str
    http_method: str = "POST"
    content_type: str = "application/json"
    timeout_s: float = config.WEBHOOK_TIMEOUT_S


def send_webhook_sync(cmd: SendWebhookSync) -> None:
    """Perform one webhook request.

    Raises:
        WebhookError: On connection failure or a non-2xx response.
    """
    headers = {"User-Agent": _USER_AGENT, "Content-Type": cmd.content_type}
    try:
        resp = requests.request(
            cmd.http_method,
            cmd.url,
            data=cmd.body.encode("utf-8"),
            headers=headers,
            timeout=cmd.timeout_s,
        )
    except requests.RequestException as exc:
        raise WebhookError(f"Webhook request to {cmd.url} failed: {exc}") from exc

    if not resp.ok:
        raise WebhookError(
            f"Webhook response status {resp.status_code} from {cmd.url}: "
            f"{resp.text[:200]}",
            status_code=resp.status_code,
        )
    logger.debug("Webhook sent to %s (status %s)", cmd.url, resp.status_code)


async def send_webhook(cmd: SendWebhookSync) -> None:
    await asyncio.to_thread(send_webhook_sync, cmd)
