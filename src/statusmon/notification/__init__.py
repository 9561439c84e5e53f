"""Outbound alerts for projects that are not operational."""

from .dispatcher import AlertDispatcher
from .formatting import format_project_alert, format_run_summary
from .mail import SendGridEmailSender
from .types import (
    AlertChannel,
    AlertMessage,
    DeliveryResult,
    NotificationError,
)
from .webhook import WebhookSender

__all__ = [
    "AlertDispatcher",
    "AlertChannel",
    "AlertMessage",
    "DeliveryResult",
    "NotificationError",
    "SendGridEmailSender",
    "WebhookSender",
    "format_project_alert",
    "format_run_summary",
]
