"""JSON files holding the latest run snapshot and a bounded run history."""

import json
import os
import tempfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..config import StorageSettings, get_settings
from ..utils.logging import get_structured_logger
from .types import ProjectResult, StorageError

logger = get_structured_logger(__name__)

SNAPSHOT_FILE = "status.json"
HISTORY_FILE = "history.json"
DEFAULT_HISTORY_LIMIT = 672  # 7 days at 15 minutes


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonResultStore:
    """Writes ``status.json`` and ``history.json`` under one output directory."""

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.output_dir = Path(output_dir or "dashboard")
        self.history_limit = history_limit

    @classmethod
    def from_settings(cls, settings: Optional[StorageSettings] = None) -> "JsonResultStore":
        settings = settings or get_settings().storage
        return cls(settings.output_dir, settings.history_limit)

    @property
    def snapshot_path(self) -> Path:
        return self.output_dir / SNAPSHOT_FILE

    @property
    def history_path(self) -> Path:
        return self.output_dir / HISTORY_FILE

    def write_snapshot(self, results: Sequence[ProjectResult]) -> Path:
        """Overwrite the current-status file with this run's results."""
        payload = {
            "updatedAt": _now_iso(),
            "results": [r.to_dict() for r in results],
        }
        self._write_json(self.snapshot_path, payload)
        logger.info("Snapshot written", path=str(self.snapshot_path), results=len(results))
        return self.snapshot_path

    def load_snapshot(self) -> Optional[dict[str, Any]]:
        """The last written snapshot, or None if there is no readable one."""
        data = self._read_json(self.snapshot_path)
        return data if isinstance(data, dict) else None

    def load_history(self) -> list[Any]:
        """Stored history records; missing or corrupt files read as empty."""
        data = self._read_json(self.history_path)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("History file is not a list, starting fresh")
            return []
        return data

    def append_history(self, results: Sequence[ProjectResult]) -> int:
        """Append one record and keep only the newest ``history_limit`` records.

        Returns the number of records stored afterwards.
        """
        history = self.load_history()
        history.append(
            {"timestamp": _now_iso(), "results": [r.to_dict() for r in results]}
        )
        if len(history) > self.history_limit:
            history = history[-self.history_limit :]

        self._write_json(self.history_path, history)
        return len(history)

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable JSON file ignored", path=str(path), error=str(e))
            return None

    def _write_json(self, path: Path, payload: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {str(e)}") from e

        # Write-then-rename so readers never see a half-written file
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {str(e)}") from e
