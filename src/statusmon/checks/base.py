"""Strategy interface and page inspection helpers shared by all checks."""

import asyncio
import re
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, Optional

from playwright.async_api import Error as PlaywrightError

from ..config import CheckSettings, get_settings
from ..utils.async_utils import poll_until
from ..utils.logging import get_structured_logger
from .aggregate import aggregate
from .types import CheckResult, ComponentResult, Status

if TYPE_CHECKING:
    from ..registry.types import Project
    from .browser import SessionProvider

logger = get_structured_logger(__name__)

PAGE_LOADS = "Page loads"


def compile_phrases(phrases: Iterable[str]) -> re.Pattern:
    """Build one case-insensitive pattern matching any of ``phrases`` literally."""
    escaped = [re.escape(p) for p in phrases if p]
    if not escaped:
        return re.compile(r"(?!x)x")
    return re.compile("|".join(escaped), re.IGNORECASE)


def find_phrase(text: str, pattern: re.Pattern) -> Optional[str]:
    """Return the first matching phrase as it appears in ``text``."""
    match = pattern.search(text or "")
    return match.group(0) if match else None


def response_status(response: Any) -> Optional[int]:
    """HTTP status of a navigation response; None when Playwright returned none."""
    if response is None:
        return None
    return response.status


def page_loads(status_code: Optional[int]) -> ComponentResult:
    ok = status_code is not None and status_code < 400
    return ComponentResult(PAGE_LOADS, Status.OPERATIONAL if ok else Status.DEGRADED)


async def read_body_text(page) -> str:
    try:
        return await page.locator("body").inner_text()
    except PlaywrightError:
        return ""


async def count_matching(page, selectors: Iterable[str]) -> int:
    """Count elements matching any of ``selectors``; 0 if the page errors."""
    try:
        return await page.locator(", ".join(selectors)).count()
    except PlaywrightError:
        return 0


async def check_navigation(page, settings: CheckSettings) -> ComponentResult:
    found = await count_matching(page, settings.navigation_selectors)
    return ComponentResult(
        "Navigation", Status.OPERATIONAL if found > 0 else Status.DEGRADED
    )


def scan_for_errors(body_text: str, phrases: Iterable[str]) -> ComponentResult:
    """Build the "No errors" component, down with the matched phrase as detail."""
    hit = find_phrase(body_text, compile_phrases(phrases))
    if hit:
        return ComponentResult("No errors", Status.DOWN, detail=hit)
    return ComponentResult("No errors", Status.OPERATIONAL)


class CheckStrategy(ABC):
    """A verification protocol for one project type.

    :meth:`check` never raises. Anything escaping :meth:`run` is turned into a
    ``down`` result carrying the exception message, with the components
    gathered so far plus a trailing "Page loads: down".
    """

    requires_browser: bool = False

    def __init__(self, settings: Optional[CheckSettings] = None):
        self.settings = settings or get_settings().checks

    async def check(
        self, project: "Project", sessions: Optional["SessionProvider"] = None
    ) -> CheckResult:
        started = time.perf_counter()
        components: list[ComponentResult] = []
        try:
            result = await self.run(project, sessions, components)
        except Exception as e:
            logger.warning(
                "Check raised, marking project down",
                project=project.id,
                error_type=type(e).__name__,
                error=str(e),
            )
            components.append(ComponentResult(PAGE_LOADS, Status.DOWN))
            return CheckResult(
                status=Status.DOWN,
                response_time_ms=_elapsed_ms(started),
                components=components,
                error=str(e) or type(e).__name__,
            )

        result.response_time_ms = _elapsed_ms(started)
        return result

    @abstractmethod
    async def run(
        self,
        project: "Project",
        sessions: Optional["SessionProvider"],
        components: list[ComponentResult],
    ) -> CheckResult:
        """Execute the protocol, appending to ``components`` as they are decided."""

    def finish(self, components: list[ComponentResult], **fields: Any) -> CheckResult:
        """Result whose status is the aggregate of ``components``."""
        return CheckResult(
            status=aggregate(components),
            response_time_ms=0,
            components=components,
            **fields,
        )

    def short_circuit(
        self, components: list[ComponentResult], **fields: Any
    ) -> CheckResult:
        """Conclusive ``down`` result; no further components will be checked."""
        return CheckResult(
            status=Status.DOWN, response_time_ms=0, components=components, **fields
        )

    async def settle(
        self,
        seconds: float,
        ready: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> bool:
        """Wait up to ``seconds`` for asynchronous rendering or redirects.

        With a ``ready`` probe the wait ends as soon as it reports True;
        otherwise (or if it never does) the full period elapses.
        """
        if ready is None:
            await asyncio.sleep(seconds)
            return True
        return await poll_until(ready, seconds, self.settings.poll_interval)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
