"""Fan a non-operational result out to the project's alert destinations."""

from collections.abc import Sequence
from typing import Optional

import httpx

from ..checks.types import CheckResult
from ..config import AlertSettings, get_settings
from ..registry.types import Project
from ..utils.logging import get_structured_logger
from .formatting import format_project_alert, format_run_summary
from .mail import SendGridEmailSender
from .types import AlertChannel, AlertMessage, DeliveryResult
from .webhook import WebhookSender

logger = get_structured_logger(__name__)


class AlertDispatcher:
    """Fire-and-forget alert delivery.

    Delivery failures are logged and reported in the returned
    ``DeliveryResult`` list; they are never raised to the caller.
    """

    def __init__(
        self,
        settings: Optional[AlertSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings().alerts
        self.email = SendGridEmailSender(
            api_key=self.settings.sendgrid_api_key.get_secret_value(),
            from_email=self.settings.from_email,
            client=client,
            timeout=self.settings.timeout,
        )
        self.webhook = WebhookSender(client=client, timeout=self.settings.timeout)

    async def notify(self, project: Project, result: CheckResult) -> list[DeliveryResult]:
        """Send the templated alert for ``project`` to each configured target."""
        target = project.alert_target
        if not target:
            logger.debug("No alert target configured", project=project.id)
            return []

        message = format_project_alert(project, result)
        deliveries = []

        if target.email:
            if self.email.configured:
                deliveries.append(
                    await self._deliver(AlertChannel.EMAIL, target.email, message)
                )
            else:
                logger.debug("Email alert skipped, no API key", project=project.id)

        if target.webhook_url:
            deliveries.append(
                await self._deliver(AlertChannel.WEBHOOK, target.webhook_url, message)
            )

        return deliveries

    async def notify_run_summary(
        self, down_projects: Sequence[Project]
    ) -> Optional[DeliveryResult]:
        """Post one summary of every down project to the global webhook."""
        url = self.settings.summary_webhook_url
        if not down_projects or not url:
            return None
        return await self._deliver(
            AlertChannel.WEBHOOK, url, format_run_summary(down_projects)
        )

    async def _deliver(
        self, channel: AlertChannel, target: str, message: AlertMessage
    ) -> DeliveryResult:
        try:
            if channel == AlertChannel.EMAIL:
                await self.email.send(target, message)
            else:
                await self.webhook.send(target, message)
        except Exception as e:
            logger.error(
                "Alert delivery failed",
                channel=channel.value,
                error_type=type(e).__name__,
                error=str(e),
            )
            return DeliveryResult(channel, target, success=False, error_message=str(e))

        logger.info("Alert delivered", channel=channel.value, subject=message.subject)
        return DeliveryResult(channel, target, success=True)
