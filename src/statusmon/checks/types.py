"""Type definitions for the health check engine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class CheckError(Exception):
    """Base exception for check-related errors."""

    pass


class UnknownProjectTypeError(CheckError):
    """Raised when a project type has no registered strategy."""

    pass


class SessionError(CheckError):
    """Raised when a browser session cannot be acquired."""

    pass


class Status(str, Enum):
    """Health of a component or a whole project, in rising severity."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {Status.OPERATIONAL: 0, Status.DEGRADED: 1, Status.DOWN: 2}


class ProjectType(str, Enum):
    """Verification protocol used for a project."""

    HTTP_HEURISTIC = "http-heuristic"
    MAGIC_LINK_SESSION = "magic-link-session"
    CREDENTIAL_LOGIN = "credential-login"

    @classmethod
    def parse(cls, value: str) -> "ProjectType":
        """Parse a registry type keyword, accepting the legacy aliases."""
        key = (value or "").strip().lower()
        key = _TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnknownProjectTypeError(f"Unknown project type: {value!r}") from None


_TYPE_ALIASES = {
    "shopify": ProjectType.HTTP_HEURISTIC.value,
    "softr": ProjectType.MAGIC_LINK_SESSION.value,
    "login": ProjectType.CREDENTIAL_LOGIN.value,
}


@dataclass(frozen=True)
class ComponentResult:
    """One independently evaluated aspect of a target page."""

    name: str
    status: Status
    detail: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "status": self.status.value, "detail": self.detail}


@dataclass
class CheckResult:
    """Outcome of checking one project."""

    status: Status
    response_time_ms: int
    components: list[ComponentResult] = field(default_factory=list)
    http_status: Optional[int] = None
    page_title: Optional[str] = None
    error: Optional[str] = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed_components(self) -> list[ComponentResult]:
        return [c for c in self.components if c.status != Status.OPERATIONAL]

    def to_dict(self) -> dict[str, Any]:
        return {
            "checkedAt": self.checked_at.isoformat(),
            "status": self.status.value,
            "responseMs": self.response_time_ms,
            "httpStatus": self.http_status,
            "pageTitle": self.page_title,
            "error": self.error,
            "components": [c.to_dict() for c in self.components],
        }
