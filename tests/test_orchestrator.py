"""Tests for the monitoring run orchestrator."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from statusmon.checks import CheckResult, ComponentResult, ProjectType, Status
from statusmon.monitor import MonitorRun, RunSummary
from statusmon.registry import Project
from statusmon.storage import JsonResultStore, StorageError

from tests.fakes import FakeSessions


def result(status: Status) -> CheckResult:
    return CheckResult(
        status=status,
        response_time_ms=50,
        components=[ComponentResult("Page loads", status)],
    )


class StubStrategies:
    """Strategy map returning canned results per project id."""

    def __init__(self, outcomes, browser_types=()):
        self.outcomes = outcomes
        self.browser_types = set(browser_types)
        self.calls = []

    def get(self, project_type):
        ProjectType.parse(project_type)
        return self

    def requires_browser(self, project_type):
        return project_type in self.browser_types

    async def check(self, project, sessions):
        self.calls.append((project.id, sessions))
        outcome = self.outcomes[project.id]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_project(name: str, type: str = "http-heuristic") -> Project:
    return Project(name=name, type=type, url=f"https://{name.lower()}.test")


@pytest.fixture
def dispatcher():
    mock = Mock()
    mock.notify = AsyncMock(return_value=[])
    mock.notify_run_summary = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def registry():
    mock = Mock()
    mock.fetch_all = AsyncMock(
        return_value=[make_project("Alpha"), make_project("Beta"), make_project("Gamma")]
    )
    return mock


def build_run(
    registry, dispatcher, outcomes, app_settings, store=None, sessions_factory=None, **kwargs
):
    return MonitorRun(
        registry=registry,
        store=store or JsonResultStore.from_settings(app_settings.storage),
        dispatcher=dispatcher,
        strategies=StubStrategies(outcomes, **kwargs),
        sessions_factory=sessions_factory or FakeSessions,
        settings=app_settings,
    )


class TestMonitorRun:
    """Test MonitorRun.execute."""

    @pytest.mark.asyncio
    async def test_one_down_project_alerts_once(self, registry, dispatcher, app_settings):
        """Exactly one down project triggers one alert and a failing exit code."""
        outcomes = {
            "alpha": result(Status.OPERATIONAL),
            "beta": result(Status.DOWN),
            "gamma": result(Status.OPERATIONAL),
        }
        run = build_run(registry, dispatcher, outcomes, app_settings)

        summary = await run.execute()

        dispatcher.notify.assert_awaited_once()
        alerted_project, alerted_result = dispatcher.notify.call_args.args
        assert alerted_project.id == "beta"
        assert alerted_result.status == Status.DOWN
        assert summary.exit_code == 1
        assert [r.project.id for r in summary.down] == ["beta"]

    @pytest.mark.asyncio
    async def test_degraded_alerts_but_exits_zero(self, registry, dispatcher, app_settings):
        """Degraded results are alerted on but never fail the run."""
        outcomes = {
            "alpha": result(Status.DEGRADED),
            "beta": result(Status.OPERATIONAL),
            "gamma": result(Status.OPERATIONAL),
        }
        summary = await build_run(registry, dispatcher, outcomes, app_settings).execute()

        assert dispatcher.notify.await_count == 1
        dispatcher.notify_run_summary.assert_not_awaited()
        assert summary.exit_code == 0
        assert len(summary.degraded) == 1

    @pytest.mark.asyncio
    async def test_projects_checked_in_registry_order(self, registry, dispatcher, app_settings):
        outcomes = {pid: result(Status.OPERATIONAL) for pid in ("alpha", "beta", "gamma")}
        run = build_run(registry, dispatcher, outcomes, app_settings)

        summary = await run.execute()

        assert [pid for pid, _ in run.strategies.calls] == ["alpha", "beta", "gamma"]
        assert [r.project.id for r in summary.results] == ["alpha", "beta", "gamma"]
        dispatcher.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_persisted(self, registry, dispatcher, app_settings):
        outcomes = {
            "alpha": result(Status.OPERATIONAL),
            "beta": result(Status.DOWN),
            "gamma": result(Status.DEGRADED),
        }
        await build_run(registry, dispatcher, outcomes, app_settings).execute()

        out = app_settings.storage.output_dir
        snapshot = json.loads((out / "status.json").read_text())
        history = json.loads((out / "history.json").read_text())
        assert [r["status"] for r in snapshot["results"]] == ["operational", "down", "degraded"]
        assert len(history) == 1

    @pytest.mark.asyncio
    async def test_dispatch_failure_is_isolated(self, registry, dispatcher, app_settings):
        """An alert channel blowing up affects neither results nor other projects."""
        dispatcher.notify.side_effect = RuntimeError("smtp exploded")
        outcomes = {
            "alpha": result(Status.DOWN),
            "beta": result(Status.DOWN),
            "gamma": result(Status.OPERATIONAL),
        }
        summary = await build_run(registry, dispatcher, outcomes, app_settings).execute()

        assert dispatcher.notify.await_count == 2
        assert len(summary.results) == 3
        assert summary.exit_code == 1

    @pytest.mark.asyncio
    async def test_strategy_exception_becomes_down(self, registry, dispatcher, app_settings):
        outcomes = {
            "alpha": RuntimeError("boom"),
            "beta": result(Status.OPERATIONAL),
            "gamma": result(Status.OPERATIONAL),
        }
        summary = await build_run(registry, dispatcher, outcomes, app_settings).execute()

        failed = summary.results[0].result
        assert failed.status == Status.DOWN
        assert failed.error == "boom"
        assert [(c.name, c.status) for c in failed.components] == [("Page loads", Status.DOWN)]
        assert summary.results[1].status == Status.OPERATIONAL

    @pytest.mark.asyncio
    async def test_unknown_type_is_down_not_fatal(self, dispatcher, app_settings):
        registry = Mock()
        registry.fetch_all = AsyncMock(
            return_value=[make_project("Odd", type="wordpress"), make_project("Alpha")]
        )
        outcomes = {"alpha": result(Status.OPERATIONAL)}
        summary = await build_run(registry, dispatcher, outcomes, app_settings).execute()

        odd = summary.results[0].result
        assert odd.status == Status.DOWN
        assert "wordpress" in odd.error
        assert summary.results[1].status == Status.OPERATIONAL

    @pytest.mark.asyncio
    async def test_only_filter(self, registry, dispatcher, app_settings):
        outcomes = {"beta": result(Status.OPERATIONAL)}
        summary = await build_run(registry, dispatcher, outcomes, app_settings).execute(
            only={"beta"}
        )
        assert [r.project.id for r in summary.results] == ["beta"]

    @pytest.mark.asyncio
    async def test_browser_only_started_when_needed(self, registry, dispatcher, app_settings):
        """No session manager is created for HTTP-only runs."""
        factory = Mock(side_effect=FakeSessions)
        outcomes = {pid: result(Status.OPERATIONAL) for pid in ("alpha", "beta", "gamma")}
        run = build_run(
            registry, dispatcher, outcomes, app_settings, sessions_factory=factory
        )

        await run.execute()

        factory.assert_not_called()
        assert all(sessions is None for _, sessions in run.strategies.calls)

    @pytest.mark.asyncio
    async def test_sessions_shared_and_closed(self, dispatcher, app_settings):
        registry = Mock()
        registry.fetch_all = AsyncMock(
            return_value=[
                make_project("Portal", type="magic-link-session"),
                make_project("Admin", type="credential-login"),
            ]
        )
        sessions = FakeSessions()
        outcomes = {"portal": result(Status.OPERATIONAL), "admin": RuntimeError("crash")}
        run = build_run(
            registry,
            dispatcher,
            outcomes,
            app_settings,
            browser_types={"magic-link-session", "credential-login"},
            sessions_factory=lambda: sessions,
        )

        await run.execute()

        assert [s for _, s in run.strategies.calls] == [sessions, sessions]
        assert sessions.shutdown

    @pytest.mark.asyncio
    async def test_storage_failure_sets_exit_code(self, registry, dispatcher, app_settings):
        store = Mock()
        store.write_snapshot.side_effect = StorageError("read-only filesystem")
        outcomes = {pid: result(Status.OPERATIONAL) for pid in ("alpha", "beta", "gamma")}

        summary = await build_run(
            registry, dispatcher, outcomes, app_settings, store=store
        ).execute()

        assert summary.storage_error == "read-only filesystem"
        assert summary.exit_code == 1

    @pytest.mark.asyncio
    async def test_run_summary_sent_for_down_projects(self, registry, dispatcher, app_settings):
        outcomes = {
            "alpha": result(Status.DOWN),
            "beta": result(Status.DEGRADED),
            "gamma": result(Status.DOWN),
        }
        await build_run(registry, dispatcher, outcomes, app_settings).execute()

        down = dispatcher.notify_run_summary.call_args.args[0]
        assert [p.id for p in down] == ["alpha", "gamma"]


class TestRunSummary:
    """Test RunSummary exit code rules."""

    def test_empty_run_succeeds(self):
        assert RunSummary().exit_code == 0
