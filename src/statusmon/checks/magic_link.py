"""Browser session check for apps entered through a pre-authenticated link."""

from urllib.parse import urlsplit

from ..utils.logging import get_structured_logger
from .base import (
    CheckStrategy,
    check_navigation,
    compile_phrases,
    count_matching,
    find_phrase,
    page_loads,
    read_body_text,
    response_status,
    scan_for_errors,
)
from .types import CheckResult, CheckError, ComponentResult, Status

logger = get_structured_logger(__name__)

MAGIC_LINK_EXPIRED = "Magic link expired"


def check_page_url(entry_url: str, check_page: str) -> str:
    """Resolve ``check_page`` against the origin of the entry link."""
    parts = urlsplit(entry_url)
    path = check_page if check_page.startswith("/") else f"/{check_page}"
    return f"{parts.scheme}://{parts.netloc}{path}"


class MagicLinkCheck(CheckStrategy):
    """Visit the magic link, confirm the session sticks, and inspect the app."""

    requires_browser = True

    async def run(self, project, sessions, components) -> CheckResult:
        if sessions is None:
            raise CheckError("Magic link check requires a browser session provider")

        expired = compile_phrases(self.settings.expired_link_phrases)

        async with sessions.session() as page:
            response = await page.goto(
                project.url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout,
            )

            async def authenticated() -> bool:
                if find_phrase(await read_body_text(page), expired):
                    return True
                if page.url == project.url:
                    return False
                return await count_matching(page, self.settings.navigation_selectors) > 0

            await self.settle(self.settings.magic_link_settle, authenticated)

            status_code = response_status(response)
            components.append(page_loads(status_code))

            if find_phrase(await read_body_text(page), expired):
                logger.info("Magic link rejected", project=project.id)
                components[:] = [
                    ComponentResult(
                        "Login", Status.DOWN, detail="Magic link expired or invalid"
                    ),
                    ComponentResult("App content", Status.DOWN),
                    ComponentResult("Data loads", Status.DOWN),
                ]
                return self.short_circuit(
                    components, http_status=status_code, error=MAGIC_LINK_EXPIRED
                )
            components.append(ComponentResult("Login", Status.OPERATIONAL))

            if project.check_page:
                target = check_page_url(project.url, project.check_page)
                await page.goto(
                    target,
                    wait_until="domcontentloaded",
                    timeout=self.settings.navigation_timeout,
                )
                await self.settle(
                    self.settings.check_page_settle, lambda: self._has_data(page)
                )

            page_title = await page.title()
            body_text = await read_body_text(page)

            components.append(await check_navigation(page, self.settings))
            components.append(
                scan_for_errors(body_text, self.settings.app_error_phrases)
            )

            if project.check_page:
                components.append(await self._data_loads(page))

        return self.finish(components, http_status=status_code, page_title=page_title)

    async def _has_data(self, page) -> bool:
        if await count_matching(page, self.settings.row_selectors) > 0:
            return True
        text = await read_body_text(page)
        return len(text) > self.settings.data_min_text_length

    async def _data_loads(self, page) -> ComponentResult:
        """Rows in any known list/table layout, or failing that enough body text."""
        rows = await count_matching(page, self.settings.row_selectors)
        text = await read_body_text(page)
        has_content = len(text) > self.settings.data_min_text_length

        if rows > 0:
            detail = f"{rows} record(s) found"
        elif has_content:
            detail = "No rows detected, page has content"
        else:
            detail = "No rows detected"
        return ComponentResult(
            "Data loads",
            Status.OPERATIONAL if rows > 0 or has_content else Status.DOWN,
            detail=detail,
        )
