"""Main CLI application using Click framework."""

import asyncio
import dataclasses
import functools
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ..checks.types import ProjectType, Status, UnknownProjectTypeError
from ..config import create_example_config, get_settings
from ..monitor import MonitorRun, RunSummary
from ..notification import AlertDispatcher
from ..registry import (
    AlertTarget,
    Credentials,
    Project,
    RegistryError,
    get_project_registry,
)
from ..storage import JsonResultStore
from ..utils.logging import get_structured_logger, setup_logging
from .types import CLIContext, CLIError, CommandResult, OutputFormat

console = Console()
logger = get_structured_logger(__name__)

STATUS_STYLES = {
    Status.OPERATIONAL.value: "green",
    Status.DEGRADED.value: "yellow",
    Status.DOWN.value: "red",
}


def async_command(f):
    """Decorator to run async functions in Click commands."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except KeyboardInterrupt:
            console.print("❌ Operation cancelled by user", style="red")
            sys.exit(1)
        except (CLIError, RegistryError, UnknownProjectTypeError) as e:
            console.print(f"❌ {str(e)}", style="red")
            logger.error(f"CLI command failed: {str(e)}")
            sys.exit(1)

    return wrapper


def handle_result(result: CommandResult, ctx: CLIContext) -> None:
    """Handle command result output."""
    if result.success:
        if result.message:
            console.print(f"✅ {result.message}", style="green")
        if result.data and ctx.verbose:
            console.print_json(data=result.data)
    else:
        console.print(f"❌ {result.message}", style="red")
        if result.data and ctx.debug:
            console.print_json(data=result.data)

    if not result.success:
        sys.exit(result.exit_code)


def render_results(rows: list[dict]) -> Table:
    """Table of per-project results with their component breakdown."""
    table = Table()
    table.add_column("Project", style="cyan")
    table.add_column("Type")
    table.add_column("Status", justify="center")
    table.add_column("Time", justify="right")
    table.add_column("Components")
    table.add_column("Error", style="red")

    for row in rows:
        status = row.get("status", "")
        components = "\n".join(
            f"{'✓' if c.get('status') == Status.OPERATIONAL.value else '✗'} "
            f"{c.get('name')}: {c.get('status')}"
            for c in row.get("components") or []
        )
        table.add_row(
            row.get("name", ""),
            row.get("type", ""),
            f"[{STATUS_STYLES.get(status, 'white')}]{status.upper()}[/]",
            f"{row.get('responseMs', 0)}ms",
            components,
            row.get("error") or "",
        )
    return table


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx, verbose: bool, debug: bool, json_logs: bool) -> None:
    """statusmon - verifies that monitored web properties actually work."""
    settings = get_settings()
    json_logs = json_logs or settings.json_logs
    setup_logging("DEBUG" if debug else settings.log_level, json_logs=json_logs)
    ctx.obj = CLIContext(verbose=verbose, debug=debug, json_logs=json_logs)


@cli.command()
@click.option(
    "--project",
    "project_ids",
    multiple=True,
    help="Only check the project with this id (repeatable)",
)
@click.pass_obj
@async_command
async def run(ctx: CLIContext, project_ids: tuple[str, ...]) -> None:
    """Check every project once and exit non-zero if any is down."""
    settings = get_settings()
    monitor = MonitorRun(
        registry=get_project_registry(settings.registry),
        store=JsonResultStore.from_settings(settings.storage),
        dispatcher=AlertDispatcher(settings.alerts),
        settings=settings,
    )

    summary: RunSummary = await monitor.execute(only=set(project_ids) or None)

    console.print(render_results([r.to_dict() for r in summary.results]))
    console.print(
        f"Checked {len(summary.results)} project(s): "
        f"{len(summary.down)} down, {len(summary.degraded)} degraded "
        f"in {ctx.elapsed_seconds:.1f}s"
    )
    if summary.storage_error:
        console.print(f"❌ Results not saved: {summary.storage_error}", style="red")

    sys.exit(summary.exit_code)


@cli.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TABLE.value,
)
@click.pass_obj
def status(ctx: CLIContext, output_format: str) -> None:
    """Show the results of the last run."""
    snapshot = JsonResultStore.from_settings().load_snapshot()
    if snapshot is None:
        handle_result(
            CommandResult(success=False, message="No results recorded yet", exit_code=1),
            ctx,
        )
        return

    if output_format == OutputFormat.JSON.value:
        console.print_json(data=snapshot)
        return

    console.print(f"Last updated: {snapshot.get('updatedAt', 'unknown')}")
    console.print(render_results(snapshot.get("results") or []))


# Project registry commands
@cli.group()
def projects():
    """Manage monitored projects."""
    pass


@projects.command("list")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TABLE.value,
)
@click.pass_obj
@async_command
async def list_projects(ctx: CLIContext, output_format: str) -> None:
    """List registered projects."""
    registry = get_project_registry()
    items = await registry.fetch_all()

    if output_format == OutputFormat.JSON.value:
        console.print_json(data=[p.to_dict() for p in items])
        return

    table = Table()
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Type")
    table.add_column("URL", style="blue")
    table.add_column("Check Page")
    table.add_column("Alerts")

    for project in items:
        target = project.alert_target
        alerts = ", ".join(t for t in (target.email, target.webhook_url and "webhook") if t)
        table.add_row(
            project.id,
            project.name,
            project.type,
            project.url,
            project.check_page or "",
            alerts or "-",
        )
    console.print(table)


def credentials_from(email: Optional[str], password: Optional[str]) -> Optional[Credentials]:
    if not email and not password:
        return None
    if not (email and password):
        raise CLIError("--email and --password must be given together")
    return Credentials(email=email, password=password)


@projects.command("add")
@click.argument("name")
@click.argument("url")
@click.option(
    "--type",
    "project_type",
    type=click.Choice([t.value for t in ProjectType]),
    default=ProjectType.HTTP_HEURISTIC.value,
)
@click.option("--check-page", help="Path probed after authentication")
@click.option("--alert-email", help="Email address for alerts")
@click.option("--webhook-url", help="Webhook URL for alerts")
@click.option("--interval", default=15, show_default=True, help="Minutes between checks")
@click.option("--email", help="Login email for credential-login projects")
@click.option("--password", help="Login password for credential-login projects")
@click.pass_obj
@async_command
async def add_project(
    ctx: CLIContext,
    name: str,
    url: str,
    project_type: str,
    check_page: Optional[str],
    alert_email: Optional[str],
    webhook_url: Optional[str],
    interval: int,
    email: Optional[str],
    password: Optional[str],
) -> None:
    """Register a new project."""
    project = Project(
        name=name,
        type=project_type,
        url=url,
        check_page=check_page,
        alert_target=AlertTarget(email=alert_email, webhook_url=webhook_url),
        credentials=credentials_from(email, password),
        interval_minutes=interval,
    )
    if not project.id:
        raise CLIError("Project name must contain letters or digits")

    await get_project_registry().add_project(project)
    handle_result(
        CommandResult(
            success=True,
            message=f"Project added: {project.name} ({project.id})",
            data=project.to_dict(),
        ),
        ctx,
    )


@projects.command("update")
@click.argument("project_id")
@click.option("--type", "project_type", type=click.Choice([t.value for t in ProjectType]))
@click.option("--url", help="Entry URL")
@click.option("--check-page", help="Path probed after authentication")
@click.option("--alert-email", help="Email address for alerts")
@click.option("--webhook-url", help="Webhook URL for alerts")
@click.option("--interval", type=int, help="Minutes between checks")
@click.option("--email", help="Login email for credential-login projects")
@click.option("--password", help="Login password for credential-login projects")
@click.pass_obj
@async_command
async def update_project(
    ctx: CLIContext,
    project_id: str,
    project_type: Optional[str],
    url: Optional[str],
    check_page: Optional[str],
    alert_email: Optional[str],
    webhook_url: Optional[str],
    interval: Optional[int],
    email: Optional[str],
    password: Optional[str],
) -> None:
    """Change fields of an existing project; omitted options are kept."""
    registry = get_project_registry()
    current = next((p for p in await registry.fetch_all() if p.id == project_id), None)
    if current is None:
        raise CLIError(f"Project not found: {project_id}")

    changes = {
        "type": project_type,
        "url": url,
        "check_page": check_page,
        "interval_minutes": interval,
        "credentials": credentials_from(email, password),
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if alert_email is not None or webhook_url is not None:
        changes["alert_target"] = dataclasses.replace(
            current.alert_target,
            **{
                k: v
                for k, v in (("email", alert_email), ("webhook_url", webhook_url))
                if v is not None
            },
        )
    if not changes:
        raise CLIError("Nothing to update")

    project = await registry.update_project(dataclasses.replace(current, **changes))
    handle_result(
        CommandResult(
            success=True,
            message=f"Project updated: {project.name} ({project.id})",
            data=project.to_dict(),
        ),
        ctx,
    )


@projects.command("remove")
@click.argument("project_id")
@click.option("--force", is_flag=True, help="Remove without confirmation")
@click.pass_obj
@async_command
async def remove_project(ctx: CLIContext, project_id: str, force: bool) -> None:
    """Remove a project by id."""
    if not force and not click.confirm(f"Remove project '{project_id}'?"):
        console.print("❌ Operation cancelled", style="yellow")
        return

    removed = await get_project_registry().remove_project(project_id)
    handle_result(
        CommandResult(
            success=removed,
            message=(
                f"Project removed: {project_id}"
                if removed
                else f"Project not found: {project_id}"
            ),
            exit_code=1,
        ),
        ctx,
    )


@projects.command("init")
@click.argument("path", type=click.Path(path_type=Path), default=Path("projects.yaml"))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_obj
def init_projects(ctx: CLIContext, path: Path, force: bool) -> None:
    """Write an example projects.yaml."""
    if path.exists() and not force:
        handle_result(
            CommandResult(
                success=False, message=f"{path} already exists (use --force)", exit_code=1
            ),
            ctx,
        )
        return

    create_example_config(path)
    handle_result(CommandResult(success=True, message=f"Example written to {path}"), ctx)
