"""Type definitions for the project registry."""

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


class RegistryError(Exception):
    """Base exception for project registry errors."""

    pass


def slugify(value: Optional[str]) -> str:
    """Derive a stable project id from its name."""
    return _NON_SLUG_RUN.sub("-", (value or "").lower()).strip("-")


@dataclass(frozen=True)
class Credentials:
    """Login credentials for a credential-login project."""

    email: str
    password: str = field(repr=False)

    def __bool__(self) -> bool:
        return bool(self.email and self.password)


@dataclass(frozen=True)
class AlertTarget:
    """Where alerts for a project are delivered."""

    email: Optional[str] = None
    webhook_url: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.email or self.webhook_url)


@dataclass(frozen=True)
class Project:
    """A monitored web property, immutable for the duration of a run."""

    name: str
    type: str
    url: str
    id: str = ""
    check_page: Optional[str] = None
    alert_target: AlertTarget = field(default_factory=AlertTarget)
    credentials: Optional[Credentials] = None
    interval_minutes: int = 15
    record_id: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", slugify(self.name))
        object.__setattr__(self, "type", (self.type or "").strip().lower())

    def to_dict(self) -> dict[str, Any]:
        """Public fields as stored alongside results (no credentials)."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "url": self.url,
            "checkPage": self.check_page or "",
            "intervalMins": self.interval_minutes,
            "alertEmail": self.alert_target.email or "",
        }


class ProjectRegistry(Protocol):
    """Source of monitored project definitions."""

    async def fetch_all(self) -> list[Project]:
        """Return every valid project in registry order."""
        ...
