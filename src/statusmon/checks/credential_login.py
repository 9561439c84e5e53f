"""Browser session check that signs in through the site's own login form."""

import asyncio
import re
from typing import Optional
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
from .types import CheckError, CheckResult, ComponentResult, Status

logger = get_structured_logger(__name__)

EMAIL_INPUT = 'input[type="email"], input[type="text"], input:not([type])'
PASSWORD_INPUT = 'input[type="password"]'
SUBMIT_BUTTON = 'button[type="submit"], input[type="submit"]'


class CredentialLoginCheck(CheckStrategy):
    """Fill in email and password, submit, and verify the app behind the login."""

    requires_browser = True

    def resolve_credentials(self, project) -> Optional[tuple[str, str]]:
        """Project credentials, else the configured fallback, else None."""
        if project.credentials:
            return project.credentials.email, project.credentials.password

        email = self.settings.default_email
        password = self.settings.default_password.get_secret_value()
        if email and password:
            return email, password
        return None

    async def run(self, project, sessions, components) -> CheckResult:
        if sessions is None:
            raise CheckError("Credential login check requires a browser session provider")

        login_route = re.compile(self.settings.login_route_pattern, re.IGNORECASE)

        async with sessions.session() as page:
            response = await page.goto(
                project.url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout,
            )
            await self.settle(
                self.settings.login_settle,
                lambda: self._form_visible(page),
            )

            status_code = response_status(response)
            loads = page_loads(status_code)
            components.append(loads)
            if loads.status != Status.OPERATIONAL:
                return self.short_circuit(components, http_status=status_code)

            credentials = self.resolve_credentials(project)
            if credentials is None:
                components.append(
                    ComponentResult(
                        "Login", Status.DEGRADED, detail="No credentials configured"
                    )
                )
            else:
                login = await self._sign_in(page, *credentials, login_route=login_route)
                components.append(login)
                if login.status == Status.DOWN:
                    logger.info(
                        "Login failed", project=project.id, detail=login.detail
                    )
                    return self.short_circuit(
                        components, http_status=status_code, error=login.detail
                    )

            page_title = await page.title()
            body_text = await read_body_text(page)
            components.append(await check_navigation(page, self.settings))
            components.append(
                scan_for_errors(body_text, self.settings.app_error_phrases)
            )

        return self.finish(components, http_status=status_code, page_title=page_title)

    async def _form_visible(self, page) -> bool:
        return await count_matching(page, [PASSWORD_INPUT]) > 0

    async def _sign_in(
        self, page, email: str, password: str, login_route: re.Pattern
    ) -> ComponentResult:
        if await count_matching(page, [EMAIL_INPUT]) == 0 or not await self._form_visible(
            page
        ):
            return ComponentResult("Login", Status.DOWN, detail="Login form not found")

        pause = self.settings.input_pause
        email_input = page.locator(EMAIL_INPUT).first
        password_input = page.locator(PASSWORD_INPUT).first

        # Reactive front-ends re-render between keystrokes; give them a beat.
        await email_input.click()
        await asyncio.sleep(pause)
        await email_input.fill(email)
        await asyncio.sleep(pause)
        await password_input.click()
        await asyncio.sleep(pause)
        await password_input.fill(password)
        await asyncio.sleep(pause)

        form_url = page.url
        if await count_matching(page, [SUBMIT_BUTTON]) > 0:
            await page.locator(SUBMIT_BUTTON).first.click()
        else:
            await password_input.press("Enter")

        rejected = compile_phrases(self.settings.login_error_phrases)

        # A form off the login route must navigate away before it counts as answered.
        async def answered() -> bool:
            if find_phrase(await read_body_text(page), rejected):
                return True
            return page.url != form_url and not login_route.search(
                urlsplit(page.url).path
            )

        await self.settle(self.settings.login_settle, answered)

        phrase = find_phrase(await read_body_text(page), rejected)
        if phrase:
            return ComponentResult(
                "Login", Status.DOWN, detail=f"Credentials rejected ({phrase})"
            )
        if login_route.search(urlsplit(page.url).path):
            return ComponentResult("Login", Status.DOWN, detail="Still on login page")
        return ComponentResult("Login", Status.OPERATIONAL)
