"""Playwright browser process and per-check isolated sessions."""

import asyncio
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Optional, Protocol

from playwright.async_api import Browser, Page, Playwright, async_playwright

from ..config import CheckSettings, get_settings
from ..utils.async_utils import run_with_timeout
from ..utils.logging import get_structured_logger
from .types import SessionError

logger = get_structured_logger(__name__)


class SessionProvider(Protocol):
    """Hands out isolated browser sessions, one per check."""

    def session(self, **context_options: Any) -> AbstractAsyncContextManager[Page]:
        """Async context manager yielding a page in a fresh browser context."""
        ...


class BrowserSessionManager:
    """One lazily started Chromium process shared by every check in a run.

    Each call to :meth:`session` creates a new browser context (fresh cookies
    and storage) which is closed on every exit path of the ``async with``
    block, so a failing check cannot leak a session.
    """

    def __init__(self, settings: Optional[CheckSettings] = None, headless: bool = True):
        self.settings = settings or get_settings().checks
        self.headless = headless
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self._browser_lock = asyncio.Lock()

    async def __aenter__(self) -> "BrowserSessionManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def started(self) -> bool:
        return self.browser is not None

    async def setup(self) -> None:
        """Start Playwright and launch Chromium if not already running."""
        if self.browser:
            return

        async with self._browser_lock:
            if self.browser:
                return

            logger.info("Launching headless Chromium")
            try:
                self.playwright = await async_playwright().start()
                self.browser = await run_with_timeout(
                    self.playwright.chromium.launch(
                        headless=self.headless,
                        args=["--no-sandbox", "--disable-dev-shm-usage"],
                    ),
                    self.settings.navigation_timeout / 1000,
                    "Timed out launching Chromium",
                )
            except Exception as e:
                await self._stop_playwright()
                raise SessionError(f"Failed to launch browser: {str(e)}") from e

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call repeatedly."""
        async with self._browser_lock:
            if self.browser:
                try:
                    await self.browser.close()
                except Exception as e:
                    logger.warning("Error while closing browser", error=str(e))
                self.browser = None
                logger.info("Browser closed")

            await self._stop_playwright()

    async def _stop_playwright(self) -> None:
        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.warning("Error while stopping Playwright", error=str(e))
            self.playwright = None

    def context_defaults(self) -> dict[str, Any]:
        """Client identity every session is created with."""
        return {
            "user_agent": self.settings.browser_user_agent,
            "viewport": {"width": 1280, "height": 800},
            "locale": "en-US",
            "timezone_id": "America/New_York",
            "extra_http_headers": {
                "Accept-Language": "en-US,en;q=0.9",
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            },
        }

    @asynccontextmanager
    async def session(self, **context_options: Any):
        """Yield a page inside a brand new browser context."""
        await self.setup()

        options = {**self.context_defaults(), **context_options}
        context = await self.browser.new_context(**options)
        try:
            page = await context.new_page()
            page.set_default_timeout(self.settings.navigation_timeout)
            page.set_default_navigation_timeout(self.settings.navigation_timeout)
            yield page
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning("Error while closing browser context", error=str(e))
