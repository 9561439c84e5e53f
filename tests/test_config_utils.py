"""Tests for configuration loading and shared utilities."""

import asyncio
import json

import pytest
import structlog
from pydantic import ValidationError

from statusmon.config import (
    AppSettings,
    CheckSettings,
    ConfigLoader,
    ConfigLoadError,
    RegistrySettings,
    StorageSettings,
    get_settings,
    reload_settings,
)
from statusmon.utils import (
    AsyncTimeoutError,
    LoggingContextManager,
    get_structured_logger,
    poll_until,
    run_with_timeout,
    setup_logging,
)


class TestSettings:
    """Test settings defaults and validation."""

    def test_check_defaults(self):
        settings = CheckSettings()
        assert settings.magic_link_settle == 8.0
        assert settings.check_page_settle == 2.0
        assert settings.login_settle == 5.0
        assert settings.navigation_timeout == 60000
        assert settings.data_min_text_length == 200
        assert "wrong password" in settings.login_error_phrases

    def test_storage_defaults(self):
        assert StorageSettings().history_limit == 672

    @pytest.mark.parametrize("field", ["magic_link_settle", "http_timeout", "login_settle"])
    def test_rejects_non_positive_periods(self, field):
        with pytest.raises(ValidationError):
            CheckSettings(**{field: 0})

    def test_rejects_negative_pause(self):
        with pytest.raises(ValidationError):
            CheckSettings(input_pause=-1)

    def test_registry_backend_validated(self):
        assert RegistrySettings(backend="YAML").backend == "yaml"
        with pytest.raises(ValidationError):
            RegistrySettings(backend="sheets")

    def test_log_level_normalised(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="loud")

    def test_nested_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STATUSMON_CHECKS__LOGIN_SETTLE", "3.5")
        monkeypatch.setenv("STATUSMON_ALERTS__SUMMARY_WEBHOOK_URL", "https://hooks.test/s")
        try:
            settings = reload_settings()
            assert settings.checks.login_settle == 3.5
            assert settings.alerts.summary_webhook_url == "https://hooks.test/s"
            assert get_settings() is settings
        finally:
            get_settings.cache_clear()


class TestConfigLoader:
    """Test YAML file loading."""

    def test_missing_file(self, tmp_path):
        assert ConfigLoader(tmp_path / "missing.yaml").load_yaml_config() == {}

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigLoadError):
            ConfigLoader(path).load_yaml_config()

    def test_save_and_load(self, tmp_path):
        loader = ConfigLoader(tmp_path / "nested" / "projects.yaml")
        loader.save_yaml_config({"projects": [{"name": "A", "url": "https://a.test"}]})
        assert loader.load_yaml_config()["projects"][0]["name"] == "A"


class TestPollUntil:
    """Test the bounded readiness wait."""

    @pytest.mark.asyncio
    async def test_returns_early_when_ready(self):
        calls = []

        async def ready():
            calls.append(1)
            return len(calls) >= 2

        assert await poll_until(ready, timeout=5, interval=0) is True
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_waits_full_timeout_when_never_ready(self):
        async def never():
            return False

        loop = asyncio.get_running_loop()
        started = loop.time()
        assert await poll_until(never, timeout=0.05, interval=0.01) is False
        assert loop.time() - started >= 0.05

    @pytest.mark.asyncio
    async def test_condition_errors_count_as_not_ready(self):
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("page navigated")
            return True

        assert await poll_until(flaky, timeout=1, interval=0) is True

    @pytest.mark.asyncio
    async def test_run_with_timeout(self):
        assert await run_with_timeout(asyncio.sleep(0, result="done"), 1) == "done"
        with pytest.raises(AsyncTimeoutError, match="too slow"):
            await run_with_timeout(asyncio.sleep(1), 0.01, "too slow")


class TestLogging:
    """Test structured logging helpers."""

    def test_context_binding_is_scoped(self):
        setup_logging("INFO", json_logs=True)
        with LoggingContextManager(project="demo-shop"):
            assert structlog.contextvars.get_contextvars()["project"] == "demo-shop"
        assert "project" not in structlog.contextvars.get_contextvars()

    def test_structured_logger_bind(self):
        logger = get_structured_logger("statusmon.test")
        bound = logger.bind(run="1")
        assert bound.name == "statusmon.test"

    def test_log_lines_carry_logger_name(self, capsys):
        setup_logging("INFO", json_logs=True)
        logger = get_structured_logger("statusmon.demo")

        logger.info("Checked", project="demo-shop")

        line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert line["logger"] == "statusmon.demo"
        assert line["event"] == "Checked"
        assert line["project"] == "demo-shop"
        assert "logger_name" not in line
