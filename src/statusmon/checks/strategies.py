"""Closed mapping from project type to the strategy that verifies it."""

from typing import Optional

import httpx

from ..config import CheckSettings
from .base import CheckStrategy
from .credential_login import CredentialLoginCheck
from .http_heuristic import HttpHeuristicCheck
from .magic_link import MagicLinkCheck
from .types import ProjectType, UnknownProjectTypeError


class StrategySet:
    """One strategy instance per project type, sharing settings and HTTP client."""

    def __init__(
        self,
        settings: Optional[CheckSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._strategies: dict[ProjectType, CheckStrategy] = {
            ProjectType.HTTP_HEURISTIC: HttpHeuristicCheck(settings, client=http_client),
            ProjectType.MAGIC_LINK_SESSION: MagicLinkCheck(settings),
            ProjectType.CREDENTIAL_LOGIN: CredentialLoginCheck(settings),
        }

    def get(self, project_type) -> CheckStrategy:
        """Strategy for ``project_type`` (enum or keyword); unknown types raise."""
        if not isinstance(project_type, ProjectType):
            project_type = ProjectType.parse(project_type)
        try:
            return self._strategies[project_type]
        except KeyError:
            raise UnknownProjectTypeError(
                f"No strategy registered for {project_type.value}"
            ) from None

    def requires_browser(self, project_type) -> bool:
        """Whether the type needs a browser; unknown types never do."""
        try:
            return self.get(project_type).requires_browser
        except UnknownProjectTypeError:
            return False
