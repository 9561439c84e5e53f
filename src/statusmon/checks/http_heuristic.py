"""Plain HTTP probe with markup presence heuristics (storefront sites)."""

import re
from typing import Optional

import httpx

from ..config import CheckSettings
from ..utils.http import use_client
from ..utils.logging import get_structured_logger
from .base import PAGE_LOADS, CheckStrategy
from .types import CheckResult, ComponentResult, Status

logger = get_structured_logger(__name__)

# Order is display order only; every detector runs independently.
DETECTORS: list[tuple[str, re.Pattern]] = [
    ("Header", re.compile(r'<header|class="header|id="header', re.IGNORECASE)),
    ("Navigation", re.compile(r'<nav|class="nav|role="navigation', re.IGNORECASE)),
    ("Products", re.compile(r"product|collection|\.product-", re.IGNORECASE)),
    ("Cart", re.compile(r"cart|basket", re.IGNORECASE)),
    ("Footer", re.compile(r'<footer|class="footer', re.IGNORECASE)),
]

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


def detect_components(html: str) -> list[ComponentResult]:
    """Run each markup detector; a miss is degraded, never down."""
    return [
        ComponentResult(
            name, Status.OPERATIONAL if pattern.search(html) else Status.DEGRADED
        )
        for name, pattern in DETECTORS
    ]


def extract_title(html: str) -> Optional[str]:
    match = _TITLE_RE.search(html)
    if not match:
        return None
    return " ".join(match.group(1).split()) or None


class HttpHeuristicCheck(CheckStrategy):
    """GET the page, then look for the building blocks of a working storefront."""

    requires_browser = False

    def __init__(
        self,
        settings: Optional[CheckSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(settings)
        self.client = client

    async def run(self, project, sessions, components) -> CheckResult:
        try:
            async with use_client(self.client, follow_redirects=True) as client:
                response = await client.get(
                    project.url,
                    headers={"User-Agent": self.settings.http_user_agent},
                    timeout=self.settings.http_timeout,
                    follow_redirects=True,
                )
        except httpx.HTTPError as e:
            logger.info(
                "HTTP probe failed", project=project.id, error=f"{type(e).__name__}: {e}"
            )
            components.append(ComponentResult(PAGE_LOADS, Status.DOWN))
            return self.short_circuit(
                components, error=str(e) or type(e).__name__
            )

        ok = response.is_success
        components.append(
            ComponentResult(PAGE_LOADS, Status.OPERATIONAL if ok else Status.DEGRADED)
        )
        if not ok:
            return self.short_circuit(components, http_status=response.status_code)

        html = response.text
        components.extend(detect_components(html))
        return self.finish(
            components,
            http_status=response.status_code,
            page_title=extract_title(html),
        )
