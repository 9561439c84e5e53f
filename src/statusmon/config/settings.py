"""Pydantic settings models for configuration management."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import ConfigError

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class CheckSettings(BaseModel):
    """Timeouts, settle periods and heuristics used by the check strategies."""

    http_timeout: float = 15.0  # seconds
    http_user_agent: str = "Mozilla/5.0 (compatible; HealthMonitor/1.0)"
    navigation_timeout: int = 60000  # milliseconds
    browser_user_agent: str = BROWSER_USER_AGENT

    # Settle periods are deadlines for a poll-until-ready loop (seconds)
    magic_link_settle: float = 8.0
    check_page_settle: float = 2.0
    login_settle: float = 5.0
    input_pause: float = 0.3
    poll_interval: float = 0.25

    data_min_text_length: int = 200
    row_selectors: list[str] = Field(
        default_factory=lambda: [
            "table tbody tr",
            "table tr + tr",
            '[class*="list-item"]',
            '[class*="record-row"]',
            '[class*="sf-list"] > *',
            '[class*="records"] > *',
            '[class*="table-row"]',
            '[class*="grid-row"]',
            '[class*="data-row"]',
            "tbody tr",
        ]
    )
    navigation_selectors: list[str] = Field(
        default_factory=lambda: [
            "nav",
            "header",
            '[class*="nav"]',
            '[class*="header"]',
            '[class*="menu"]',
        ]
    )
    expired_link_phrases: list[str] = Field(
        default_factory=lambda: [
            "magic link is no longer valid",
            "link has expired",
            "invalid link",
        ]
    )
    app_error_phrases: list[str] = Field(
        default_factory=lambda: [
            "invalid permissions",
            "database is missing",
            "something went wrong",
            "database connection",
            "access denied",
        ]
    )
    login_error_phrases: list[str] = Field(
        default_factory=lambda: [
            "invalid",
            "incorrect",
            "wrong password",
            "failed",
        ]
    )
    login_route_pattern: str = r"login|signin|sign-in|auth"

    # Used when a credential-login project carries no credentials of its own
    default_email: Optional[str] = None
    default_password: SecretStr = Field(default=SecretStr(""))

    @field_validator(
        "http_timeout",
        "navigation_timeout",
        "magic_link_settle",
        "check_page_settle",
        "login_settle",
    )
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Timeouts and settle periods must be positive")
        return v

    @field_validator("input_pause", "poll_interval")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Pauses cannot be negative")
        return v


class RegistrySettings(BaseModel):
    """Where monitored projects are read from."""

    backend: str = "airtable"
    airtable_base_id: str = ""
    airtable_token: SecretStr = Field(default=SecretStr(""))
    airtable_table: str = "Projects"
    airtable_view: str = "Grid view"
    projects_file: Path = Path("projects.yaml")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v):
        if v.lower() not in ("airtable", "yaml"):
            raise ValueError("Registry backend must be 'airtable' or 'yaml'")
        return v.lower()


class StorageSettings(BaseModel):
    """Result persistence configuration."""

    output_dir: Path = Path("dashboard")
    history_limit: int = 672  # 7 days at a 15-minute cadence

    @field_validator("history_limit")
    @classmethod
    def validate_history_limit(cls, v):
        if v <= 0:
            raise ValueError("History limit must be positive")
        return v


class AlertSettings(BaseModel):
    """Outbound alert channel configuration."""

    sendgrid_api_key: SecretStr = Field(default=SecretStr(""))
    from_email: str = "monitor@noreply.com"
    summary_webhook_url: Optional[str] = None
    timeout: float = 10.0


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STATUSMON_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    checks: CheckSettings = Field(default_factory=CheckSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    alerts: AlertSettings = Field(default_factory=AlertSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


@lru_cache
def get_settings() -> AppSettings:
    """Get the application settings instance."""
    try:
        return AppSettings()
    except Exception as e:
        raise ConfigError(f"Failed to load settings: {str(e)}") from e


def reload_settings() -> AppSettings:
    """Force reload of settings (useful for testing)."""
    get_settings.cache_clear()
    return get_settings()
