"""Health verification engine.

Type-specific strategies drive either a plain HTTP probe or an isolated
browser session, inspect independent parts of the target page and fold them
into one overall status.
"""

from .aggregate import aggregate, needs_escalation
from .base import CheckStrategy
from .browser import BrowserSessionManager, SessionProvider
from .credential_login import CredentialLoginCheck
from .http_heuristic import HttpHeuristicCheck
from .magic_link import MAGIC_LINK_EXPIRED, MagicLinkCheck
from .strategies import StrategySet
from .types import (
    CheckError,
    CheckResult,
    ComponentResult,
    ProjectType,
    SessionError,
    Status,
    UnknownProjectTypeError,
)

__all__ = [
    # Types
    "Status",
    "ProjectType",
    "ComponentResult",
    "CheckResult",
    "CheckError",
    "SessionError",
    "UnknownProjectTypeError",
    # Aggregation
    "aggregate",
    "needs_escalation",
    # Sessions
    "SessionProvider",
    "BrowserSessionManager",
    # Strategies
    "CheckStrategy",
    "HttpHeuristicCheck",
    "MagicLinkCheck",
    "CredentialLoginCheck",
    "MAGIC_LINK_EXPIRED",
    "StrategySet",
]
