"""Fold component results into one overall status."""

from collections.abc import Iterable

from .types import ComponentResult, Status


def aggregate(components: Iterable[ComponentResult]) -> Status:
    """Return the most severe status among ``components``.

    ``down`` beats ``degraded`` beats ``operational``; an empty sequence is
    ``operational``.
    """
    overall = Status.OPERATIONAL
    for component in components:
        if component.status == Status.DOWN:
            return Status.DOWN
        if component.status.severity > overall.severity:
            overall = component.status
    return overall


def needs_escalation(status: Status) -> bool:
    """Whether a result with this status should be sent to the alert channels."""
    return status != Status.OPERATIONAL
