"""Project registry backed by a local YAML file."""

from pathlib import Path
from typing import Any, Optional

from ..config import ConfigError, ConfigLoader
from ..utils.logging import get_structured_logger
from .types import AlertTarget, Credentials, Project, RegistryError

logger = get_structured_logger(__name__)


DEFAULT_INTERVAL = 15


def project_from_dict(data: dict[str, Any]) -> Project:
    credentials = None
    if data.get("email") and data.get("password"):
        credentials = Credentials(email=str(data["email"]), password=str(data["password"]))

    return Project(
        name=str(data.get("name") or "").strip(),
        type=str(data.get("type") or "http-heuristic"),
        url=str(data.get("url") or "").strip(),
        check_page=data.get("check_page") or None,
        alert_target=AlertTarget(
            email=data.get("alert_email") or None,
            webhook_url=data.get("webhook_url") or None,
        ),
        credentials=credentials,
        interval_minutes=_interval(data.get("interval_minutes")),
    )


def _interval(value: Any) -> int:
    try:
        return int(value or DEFAULT_INTERVAL)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid check interval", value=value)
        return DEFAULT_INTERVAL


def project_to_dict(project: Project) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": project.name,
        "type": project.type,
        "url": project.url,
        "interval_minutes": project.interval_minutes,
    }
    if project.check_page:
        data["check_page"] = project.check_page
    if project.alert_target.email:
        data["alert_email"] = project.alert_target.email
    if project.alert_target.webhook_url:
        data["webhook_url"] = project.alert_target.webhook_url
    if project.credentials:
        data["email"] = project.credentials.email
        data["password"] = project.credentials.password
    return data


class YamlProjectRegistry:
    """Projects listed under a top-level ``projects:`` key."""

    def __init__(self, path: Optional[Path] = None):
        self.loader = ConfigLoader(path)

    def _load_entries(self) -> tuple[dict[str, Any], list[Any]]:
        try:
            config = self.loader.load_yaml_config()
        except ConfigError as e:
            raise RegistryError(str(e)) from e

        entries = config.get("projects") or []
        if not isinstance(entries, list):
            raise RegistryError(f"'projects' in {self.loader.config_file} must be a list")
        return config, entries

    def _save_entries(self, config: dict[str, Any], entries: list[Any]) -> None:
        config["projects"] = entries
        try:
            self.loader.save_yaml_config(config)
        except ConfigError as e:
            raise RegistryError(str(e)) from e

    async def fetch_all(self) -> list[Project]:
        _, entries = self._load_entries()

        projects = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning("Ignoring malformed project entry", index=i)
                continue
            project = project_from_dict(entry)
            if project.name and project.url:
                projects.append(project)
        return projects

    async def add_project(self, project: Project) -> Project:
        config, entries = self._load_entries()
        for entry in entries:
            if isinstance(entry, dict) and project_from_dict(entry).id == project.id:
                raise RegistryError(f"Project {project.id} already exists")

        entries.append(project_to_dict(project))
        self._save_entries(config, entries)
        logger.info("Project added", project=project.id)
        return project

    async def update_project(self, project: Project) -> Project:
        config, entries = self._load_entries()
        for i, entry in enumerate(entries):
            if isinstance(entry, dict) and project_from_dict(entry).id == project.id:
                entries[i] = project_to_dict(project)
                self._save_entries(config, entries)
                logger.info("Project updated", project=project.id)
                return project
        raise RegistryError(f"Project {project.id} not found")

    async def remove_project(self, project_id: str) -> bool:
        config, entries = self._load_entries()
        remaining = [
            e
            for e in entries
            if not (isinstance(e, dict) and project_from_dict(e).id == project_id)
        ]
        if len(remaining) == len(entries):
            return False

        self._save_entries(config, remaining)
        logger.info("Project removed", project=project_id)
        return True
