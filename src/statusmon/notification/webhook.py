"""Webhook delivery (Slack-compatible ``{"text": ...}`` payloads)."""

from typing import Optional

import httpx

from ..utils.http import use_client
from .types import AlertMessage, NotificationError


class WebhookSender:
    """POSTs alert text as JSON to an incoming-webhook URL."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self.client = client
        self.timeout = timeout

    async def send(self, url: str, message: AlertMessage) -> None:
        async with use_client(self.client) as client:
            response = await client.post(
                url, json={"text": message.body}, timeout=self.timeout
            )
        if not response.is_success:
            raise NotificationError(f"Webhook returned {response.status_code}")
