"""Type definitions for monitoring runs."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..checks.types import Status
from ..storage.types import ProjectResult


@dataclass
class RunSummary:
    """Everything one monitoring pass produced."""

    results: list[ProjectResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    storage_error: Optional[str] = None

    @property
    def down(self) -> list[ProjectResult]:
        return [r for r in self.results if r.status == Status.DOWN]

    @property
    def degraded(self) -> list[ProjectResult]:
        return [r for r in self.results if r.status == Status.DEGRADED]

    @property
    def exit_code(self) -> int:
        """1 when any project is down or results could not be saved, else 0.

        Degraded projects never affect the exit code.
        """
        return 1 if self.down or self.storage_error else 0
