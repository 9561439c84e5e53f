"""Type definitions for the notification module."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class AlertChannel(str, Enum):
    """Delivery channels an alert can go out on."""

    EMAIL = "email"
    WEBHOOK = "webhook"


@dataclass
class AlertMessage:
    """A rendered alert, ready for any channel."""

    subject: str
    body: str


@dataclass
class DeliveryResult:
    """Result of delivering one alert on one channel."""

    channel: AlertChannel
    target: str
    success: bool
    error_message: Optional[str] = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
