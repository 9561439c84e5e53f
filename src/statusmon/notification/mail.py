"""Email delivery through the SendGrid v3 HTTP API."""

from typing import Optional

import httpx

from ..utils.http import use_client
from .types import AlertMessage, NotificationError

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridEmailSender:
    """Sends plain-text alert emails."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.client = client
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send(self, to_email: str, message: AlertMessage) -> None:
        payload = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.from_email},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.body}],
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with use_client(self.client) as client:
            response = await client.post(
                SENDGRID_URL, json=payload, headers=headers, timeout=self.timeout
            )
        if not response.is_success:
            raise NotificationError(
                f"SendGrid returned {response.status_code}: {response.text[:200]}"
            )
