"""Persistence of run snapshots and bounded history."""

from .result_store import DEFAULT_HISTORY_LIMIT, JsonResultStore
from .types import ProjectResult, StorageError

__all__ = [
    "JsonResultStore",
    "ProjectResult",
    "StorageError",
    "DEFAULT_HISTORY_LIMIT",
]
