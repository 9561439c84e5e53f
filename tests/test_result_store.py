"""Tests for run snapshot and history persistence."""

import json
from unittest.mock import patch

import pytest

from statusmon.checks import CheckResult, ComponentResult, Status
from statusmon.config import StorageSettings
from statusmon.registry import Project
from statusmon.storage import (
    DEFAULT_HISTORY_LIMIT,
    JsonResultStore,
    ProjectResult,
    StorageError,
)


def project_result(name: str = "Demo Shop", status: Status = Status.OPERATIONAL) -> ProjectResult:
    project = Project(name=name, type="http-heuristic", url="https://shop.test")
    result = CheckResult(
        status=status,
        response_time_ms=120,
        components=[ComponentResult("Page loads", status)],
        http_status=200,
    )
    return ProjectResult(project, result)


@pytest.fixture
def store(tmp_path):
    return JsonResultStore(tmp_path / "dashboard")


class TestSnapshot:
    """Test the current-status snapshot."""

    def test_write_and_load(self, store):
        path = store.write_snapshot([project_result(), project_result("Portal", Status.DOWN)])

        data = json.loads(path.read_text())
        assert path.name == "status.json"
        assert "updatedAt" in data
        assert [r["id"] for r in data["results"]] == ["demo-shop", "portal"]
        assert data["results"][1]["status"] == "down"
        assert store.load_snapshot() == data

    def test_snapshot_has_no_credentials(self, store):
        """Stored records carry project fields but never credentials."""
        store.write_snapshot([project_result()])
        record = store.load_snapshot()["results"][0]
        assert set(record) >= {"id", "name", "type", "url", "status", "components"}
        assert "credentials" not in record

    def test_load_missing_snapshot(self, store):
        assert store.load_snapshot() is None

    def test_no_temp_files_left_behind(self, store):
        store.write_snapshot([project_result()])
        assert [p.name for p in store.output_dir.iterdir()] == ["status.json"]


class TestHistory:
    """Test the bounded run history."""

    def test_default_limit_is_one_week(self):
        assert DEFAULT_HISTORY_LIMIT == 672

    def test_append_grows_history(self, store):
        assert store.append_history([project_result()]) == 1
        assert store.append_history([project_result()]) == 2
        assert len(store.load_history()) == 2

    def test_history_capped_with_oldest_evicted(self, tmp_path):
        """Only the newest records survive once the cap is reached."""
        store = JsonResultStore(tmp_path, history_limit=DEFAULT_HISTORY_LIMIT)
        existing = [{"timestamp": f"t{i}", "results": []} for i in range(DEFAULT_HISTORY_LIMIT)]
        store.history_path.write_text(json.dumps(existing))

        count = store.append_history([project_result()])

        history = store.load_history()
        assert count == len(history) == DEFAULT_HISTORY_LIMIT
        assert history[0]["timestamp"] == "t1"
        assert history[-1]["results"][0]["id"] == "demo-shop"

    def test_small_limit(self, tmp_path):
        store = JsonResultStore(tmp_path, history_limit=3)
        for _ in range(5):
            store.append_history([project_result()])
        assert len(store.load_history()) == 3

    def test_corrupt_history_starts_fresh(self, store):
        store.output_dir.mkdir(parents=True)
        store.history_path.write_text("{not json")

        assert store.load_history() == []
        assert store.append_history([project_result()]) == 1

    def test_non_list_history_starts_fresh(self, store):
        store.output_dir.mkdir(parents=True)
        store.history_path.write_text(json.dumps({"results": []}))
        assert store.load_history() == []

    def test_from_settings(self, tmp_path):
        store = JsonResultStore.from_settings(
            StorageSettings(output_dir=tmp_path / "out", history_limit=10)
        )
        assert store.output_dir == tmp_path / "out"
        assert store.history_limit == 10


class TestWriteFailures:
    """Test error handling for unwritable storage."""

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = JsonResultStore(blocker / "dashboard")

        with pytest.raises(StorageError):
            store.write_snapshot([project_result()])

    def test_failed_replace_cleans_up(self, store):
        with patch("statusmon.storage.result_store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="disk full"):
                store.write_snapshot([project_result()])

        assert list(store.output_dir.iterdir()) == []
