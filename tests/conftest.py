"""Test configuration and fixtures for the statusmon test suite."""

import pytest

from statusmon.config import AlertSettings, AppSettings, CheckSettings, StorageSettings
from statusmon.registry import AlertTarget, Credentials, Project


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture
def check_settings() -> CheckSettings:
    """Check settings with settle periods short enough for unit tests."""
    return CheckSettings(
        magic_link_settle=0.01,
        check_page_settle=0.01,
        login_settle=0.01,
        input_pause=0,
        poll_interval=0,
    )


@pytest.fixture
def app_settings(check_settings, tmp_path) -> AppSettings:
    return AppSettings(
        checks=check_settings,
        storage=StorageSettings(output_dir=tmp_path / "dashboard"),
        alerts=AlertSettings(),
    )


@pytest.fixture
def shop_project() -> Project:
    return Project(
        name="Demo Shop",
        type="http-heuristic",
        url="https://shop.example.com/",
        alert_target=AlertTarget(email="ops@example.com"),
    )


@pytest.fixture
def portal_project() -> Project:
    return Project(
        name="Partner Portal",
        type="magic-link-session",
        url="https://portal.example.com/login?token=abc",
        check_page="/records",
    )


@pytest.fixture
def admin_project() -> Project:
    return Project(
        name="Admin Console",
        type="credential-login",
        url="https://admin.example.com/login",
        credentials=Credentials(email="monitor@example.com", password="hunter2"),
    )
