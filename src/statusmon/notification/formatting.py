"""Plain-text alert templates."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from ..checks.types import CheckResult, Status
from ..registry.types import Project
from .types import AlertMessage

STATUS_ICONS = {
    Status.OPERATIONAL: "✓",
    Status.DEGRADED: "✗",
    Status.DOWN: "✗",
}


def format_project_alert(
    project: Project, result: CheckResult, now: Optional[datetime] = None
) -> AlertMessage:
    """Alert for a single non-operational project."""
    now = now or datetime.now(timezone.utc)
    status = result.status.value.upper()

    lines = [
        f"{project.name} is {status}",
        f"URL: {project.url}",
        f"Response: {result.response_time_ms}ms",
    ]
    if result.http_status is not None:
        lines.append(f"HTTP status: {result.http_status}")

    failed = result.failed_components
    if failed:
        lines.append("Failed components:")
        for component in failed:
            line = f"  {STATUS_ICONS[component.status]} {component.name}: {component.status.value}"
            if component.detail:
                line += f" ({component.detail})"
            lines.append(line)

    if result.error:
        lines.append(f"Error: {result.error}")
    lines.append(f"Checked: {now.strftime('%a, %d %b %Y %H:%M:%S GMT')}")

    return AlertMessage(subject=f"🚨 {project.name} is {status}", body="\n".join(lines))


def format_run_summary(down_projects: Sequence[Project]) -> AlertMessage:
    """One message listing every project that was down in a run."""
    lines = ["🚨 *Health Alert*"]
    lines.extend(f"❌ *{p.name}* is DOWN" for p in down_projects)
    return AlertMessage(
        subject=f"{len(down_projects)} project(s) down", body="\n".join(lines)
    )
