"""Project registry backed by an Airtable table."""

from typing import Any, Optional

import httpx

from ..config import RegistrySettings
from ..utils.http import use_client
from ..utils.logging import get_structured_logger
from .types import AlertTarget, Credentials, Project, RegistryError

logger = get_structured_logger(__name__)

API_ROOT = "https://api.airtable.com/v0"

FIELD_NAME = "Project Name"
FIELD_TYPE = "Type"
FIELD_URL = "URL"
FIELD_INTERVAL = "Check Interval (mins)"
FIELD_ALERT_EMAIL = "Alert Email"
FIELD_WEBHOOK = "Webhook URL"
FIELD_CHECK_PAGE = "Check Page"
FIELD_LOGIN_EMAIL = "Login Email"
FIELD_LOGIN_PASSWORD = "Login Password"

DEFAULT_TYPE = "shopify"
DEFAULT_INTERVAL = 15


def map_record(record: dict[str, Any]) -> Project:
    """Convert one Airtable record into a Project."""
    fields = record.get("fields") or {}

    credentials = None
    if fields.get(FIELD_LOGIN_EMAIL) and fields.get(FIELD_LOGIN_PASSWORD):
        credentials = Credentials(
            email=fields[FIELD_LOGIN_EMAIL], password=fields[FIELD_LOGIN_PASSWORD]
        )

    try:
        interval = int(fields.get(FIELD_INTERVAL) or DEFAULT_INTERVAL)
    except (TypeError, ValueError):
        interval = DEFAULT_INTERVAL

    return Project(
        name=(fields.get(FIELD_NAME) or "").strip(),
        type=fields.get(FIELD_TYPE) or DEFAULT_TYPE,
        url=(fields.get(FIELD_URL) or "").strip(),
        check_page=fields.get(FIELD_CHECK_PAGE) or None,
        alert_target=AlertTarget(
            email=fields.get(FIELD_ALERT_EMAIL) or None,
            webhook_url=fields.get(FIELD_WEBHOOK) or None,
        ),
        credentials=credentials,
        interval_minutes=interval,
        record_id=record.get("id"),
    )


def project_fields(project: Project) -> dict[str, Any]:
    """Fields written back to Airtable when adding or updating a project."""
    fields = {
        FIELD_NAME: project.name,
        FIELD_TYPE: project.type,
        FIELD_URL: project.url,
        FIELD_INTERVAL: int(project.interval_minutes or DEFAULT_INTERVAL),
        FIELD_ALERT_EMAIL: project.alert_target.email or "",
        FIELD_CHECK_PAGE: project.check_page or "",
    }
    if project.alert_target.webhook_url:
        fields[FIELD_WEBHOOK] = project.alert_target.webhook_url
    if project.credentials:
        fields[FIELD_LOGIN_EMAIL] = project.credentials.email
        fields[FIELD_LOGIN_PASSWORD] = project.credentials.password
    return fields


class AirtableProjectRegistry:
    """Reads and maintains monitored projects in an Airtable table."""

    def __init__(
        self,
        base_id: str,
        token: str,
        table: str = "Projects",
        view: Optional[str] = "Grid view",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ):
        if not base_id or not token:
            raise RegistryError("Airtable base id and token must be configured")

        self.base_url = f"{API_ROOT}/{base_id}/{table}"
        self.view = view
        self.client = client
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(
        cls, settings: RegistrySettings, client: Optional[httpx.AsyncClient] = None
    ) -> "AirtableProjectRegistry":
        return cls(
            base_id=settings.airtable_base_id,
            token=settings.airtable_token.get_secret_value(),
            table=settings.airtable_table,
            view=settings.airtable_view,
            client=client,
        )

    async def _request(
        self, method: str, url: str, action: str, **kwargs: Any
    ) -> dict[str, Any]:
        try:
            async with use_client(self.client) as client:
                response = await client.request(
                    method, url, headers=self._headers, timeout=self.timeout, **kwargs
                )
        except httpx.HTTPError as e:
            raise RegistryError(f"Airtable {action} failed: {str(e)}") from e

        if not response.is_success:
            raise RegistryError(
                f"Airtable {action} failed: {response.status_code} {response.text}"
            )
        return response.json()

    async def list_records(self) -> list[dict[str, Any]]:
        """Every raw record in view order, following pagination."""
        records: list[dict[str, Any]] = []
        params: dict[str, str] = {}
        if self.view:
            params["view"] = self.view

        while True:
            data = await self._request("GET", self.base_url, "GET", params=params)
            records.extend(data.get("records") or [])
            offset = data.get("offset")
            if not offset:
                return records
            params = {**params, "offset": offset}

    async def fetch_all(self) -> list[Project]:
        """Projects in registry order, skipping rows without a name or URL."""
        projects = [map_record(r) for r in await self.list_records()]
        valid = [p for p in projects if p.name and p.url]

        if len(valid) < len(projects):
            logger.info(
                "Skipped incomplete registry rows", skipped=len(projects) - len(valid)
            )
        return valid

    async def add_project(self, project: Project) -> Project:
        data = await self._request(
            "POST",
            self.base_url,
            "POST",
            json={"records": [{"fields": project_fields(project)}]},
        )
        created = (data.get("records") or [{}])[0]
        logger.info("Project added", project=project.id, record_id=created.get("id"))
        return map_record(created) if created.get("fields") else project

    async def update_project(self, project: Project) -> Project:
        if not project.record_id:
            raise RegistryError(f"Project {project.id} has no Airtable record id")
        data = await self._request(
            "PATCH",
            f"{self.base_url}/{project.record_id}",
            "PATCH",
            json={"fields": project_fields(project)},
        )
        logger.info("Project updated", project=project.id)
        return map_record(data)

    async def delete_project(self, record_id: str) -> bool:
        data = await self._request("DELETE", f"{self.base_url}/{record_id}", "DELETE")
        logger.info("Project deleted", record_id=record_id)
        return bool(data.get("deleted", True))

    async def remove_project(self, project_id: str) -> bool:
        """Delete the project whose slug is ``project_id``; False if absent."""
        for project in await self.fetch_all():
            if project.id == project_id and project.record_id:
                return await self.delete_project(project.record_id)
        return False
