"""Monitored project definitions and where they come from."""

from typing import Optional

import httpx

from ..config import RegistrySettings, get_settings
from .airtable import AirtableProjectRegistry
from .types import (
    AlertTarget,
    Credentials,
    Project,
    ProjectRegistry,
    RegistryError,
    slugify,
)
from .yaml_registry import YamlProjectRegistry


def get_project_registry(
    settings: Optional[RegistrySettings] = None,
    client: Optional[httpx.AsyncClient] = None,
):
    """Build the registry selected by configuration."""
    settings = settings or get_settings().registry
    if settings.backend == "yaml":
        return YamlProjectRegistry(settings.projects_file)
    return AirtableProjectRegistry.from_settings(settings, client=client)


__all__ = [
    "Project",
    "Credentials",
    "AlertTarget",
    "ProjectRegistry",
    "RegistryError",
    "slugify",
    "AirtableProjectRegistry",
    "YamlProjectRegistry",
    "get_project_registry",
]
