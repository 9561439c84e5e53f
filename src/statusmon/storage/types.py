"""Type definitions for result persistence."""

from dataclasses import dataclass
from typing import Any

from ..checks.types import CheckResult, Status
from ..registry.types import Project


class StorageError(Exception):
    """Base exception for storage-related errors."""

    pass


@dataclass(frozen=True)
class ProjectResult:
    """A project together with the outcome of checking it in one run."""

    project: Project
    result: CheckResult

    @property
    def status(self) -> Status:
        return self.result.status

    def to_dict(self) -> dict[str, Any]:
        """Project fields merged with the result fields, as stored on disk."""
        return {**self.project.to_dict(), **self.result.to_dict()}
