"""One sequential monitoring pass over every registered project."""

from collections.abc import Callable, Collection
from datetime import datetime, timezone
from typing import Optional

from ..checks.aggregate import needs_escalation
from ..checks.base import PAGE_LOADS
from ..checks.browser import BrowserSessionManager
from ..checks.strategies import StrategySet
from ..checks.types import (
    CheckResult,
    ComponentResult,
    Status,
    UnknownProjectTypeError,
)
from ..config import AppSettings, get_settings
from ..notification import AlertDispatcher
from ..registry.types import Project, ProjectRegistry
from ..storage import JsonResultStore, ProjectResult, StorageError
from ..utils.logging import LoggingContextManager, get_structured_logger
from .types import RunSummary

logger = get_structured_logger(__name__)


class MonitorRun:
    """Checks projects one at a time, alerts on failures and persists results.

    Projects are never checked in parallel: at most one browser process and
    one page are alive at any moment, and sessions against the same
    authenticated target cannot interfere with each other.
    """

    def __init__(
        self,
        registry: ProjectRegistry,
        store: JsonResultStore,
        dispatcher: AlertDispatcher,
        strategies: Optional[StrategySet] = None,
        sessions_factory: Optional[Callable[[], BrowserSessionManager]] = None,
        settings: Optional[AppSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.store = store
        self.dispatcher = dispatcher
        self.strategies = strategies or StrategySet(self.settings.checks)
        self.sessions_factory = sessions_factory or (
            lambda: BrowserSessionManager(self.settings.checks)
        )

    async def execute(self, only: Optional[Collection[str]] = None) -> RunSummary:
        """Run one pass. ``only`` restricts the pass to the given project ids."""
        summary = RunSummary()

        projects = await self.registry.fetch_all()
        if only:
            projects = [p for p in projects if p.id in only]
        logger.info(
            "Loaded projects",
            count=len(projects),
            projects=[f"[{p.type.upper()}] {p.name}" for p in projects],
        )

        needs_browser = any(self.strategies.requires_browser(p.type) for p in projects)
        sessions = self.sessions_factory() if needs_browser else None

        try:
            for project in projects:
                with LoggingContextManager(project=project.id):
                    result = await self.check_project(project, sessions)
                    self._log_result(project, result)

                    if needs_escalation(result.status):
                        await self._dispatch(project, result)

                summary.results.append(ProjectResult(project, result))
        finally:
            if sessions is not None:
                await sessions.close()

        self._persist(summary)

        if summary.down:
            await self.dispatcher.notify_run_summary([r.project for r in summary.down])

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "Run complete",
            checked=len(summary.results),
            down=len(summary.down),
            degraded=len(summary.degraded),
            exit_code=summary.exit_code,
        )
        return summary

    async def check_project(self, project: Project, sessions) -> CheckResult:
        """Check one project; every failure becomes a ``down`` result."""
        try:
            strategy = self.strategies.get(project.type)
            return await strategy.check(project, sessions)
        except UnknownProjectTypeError as e:
            logger.error("No strategy for project", error=str(e))
            error = str(e)
        except Exception as e:
            logger.exception("Project check failed", error_type=type(e).__name__)
            error = str(e) or type(e).__name__

        return CheckResult(
            status=Status.DOWN,
            response_time_ms=0,
            components=[ComponentResult(PAGE_LOADS, Status.DOWN)],
            error=error,
        )

    async def _dispatch(self, project: Project, result: CheckResult) -> None:
        try:
            await self.dispatcher.notify(project, result)
        except Exception as e:
            logger.error(
                "Alert dispatch failed", error_type=type(e).__name__, error=str(e)
            )

    def _persist(self, summary: RunSummary) -> None:
        try:
            self.store.write_snapshot(summary.results)
            self.store.append_history(summary.results)
        except StorageError as e:
            logger.error("Failed to save results", error=str(e))
            summary.storage_error = str(e)

    def _log_result(self, project: Project, result: CheckResult) -> None:
        log = logger.warning if result.status == Status.DOWN else logger.info
        log(
            "Project checked",
            name=project.name,
            type=project.type,
            status=result.status.value,
            response_ms=result.response_time_ms,
            http_status=result.http_status,
            error=result.error,
            components=[f"{c.name}: {c.status.value}" for c in result.components],
        )
