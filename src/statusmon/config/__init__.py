"""Configuration management for statusmon."""

from .loader import ConfigLoader, create_example_config
from .settings import (
    AlertSettings,
    AppSettings,
    CheckSettings,
    RegistrySettings,
    StorageSettings,
    get_settings,
    reload_settings,
)
from .types import ConfigError, ConfigLoadError

__all__ = [
    "ConfigLoader",
    "create_example_config",
    "AppSettings",
    "CheckSettings",
    "RegistrySettings",
    "StorageSettings",
    "AlertSettings",
    "get_settings",
    "reload_settings",
    "ConfigError",
    "ConfigLoadError",
]
