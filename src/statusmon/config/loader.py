"""YAML file loading and persistence utilities."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .types import ConfigError, ConfigLoadError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Reads and writes a YAML document such as ``projects.yaml``."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file or "projects.yaml")

    def load_yaml_config(self) -> dict[str, Any]:
        """Load the YAML file, returning an empty mapping if it does not exist."""
        if not self.config_file.exists():
            logger.warning(f"Config file {self.config_file} not found, using defaults")
            return {}

        try:
            with open(self.config_file, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Failed to parse YAML config: {str(e)}") from e
        except OSError as e:
            raise ConfigLoadError(f"Failed to load config file: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigLoadError(
                f"Expected a mapping at the top of {self.config_file}"
            )
        return config

    def save_yaml_config(self, config: dict[str, Any]) -> None:
        """Save configuration to YAML file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save config file: {str(e)}") from e

        logger.info(f"Saved configuration to {self.config_file}")


def create_example_config(config_path: Path) -> None:
    """Write an example projects file covering every project type."""
    example_config = {
        "projects": [
            {
                "name": "Example Store",
                "type": "http-heuristic",
                "url": "https://shop.example.com",
                "alert_email": "ops@example.com",
            },
            {
                "name": "Partner Portal",
                "type": "magic-link-session",
                "url": "https://portal.example.com/magic-link?token=CHANGE-ME",
                "check_page": "/records",
                "webhook_url": "https://hooks.example.com/portal",
            },
            {
                "name": "Admin Console",
                "type": "credential-login",
                "url": "https://admin.example.com/login",
                "email": "monitor@example.com",
                "password": "CHANGE-ME",
            },
        ]
    }

    ConfigLoader(config_path).save_yaml_config(example_config)
