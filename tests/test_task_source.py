"""
Tests for task sources - SQLite record store and file-backed in-memory source.
"""

import json
import sqlite3

import pytest

from timeline.errors import InvalidTaskRecord, TaskSourceError
from timeline.models import TaskStatus
from timeline.task_source import InMemoryTaskSource, SQLiteTaskSource

from tests.fixtures import SEED_PATH, make_task, day


class TestSQLiteTaskSource:
    def test_ordered_by_creation(self, fixture_db_path):
        tasks = SQLiteTaskSource(fixture_db_path).list_tasks("tower-a")
        assert [t.id for t in tasks] == ["ta-1", "ta-2", "ta-4", "ta-3"]

    def test_rows_are_parsed(self, fixture_db_path):
        tasks = SQLiteTaskSource(fixture_db_path).list_tasks("tower-b")
        assert len(tasks) == 1
        tb1 = tasks[0]
        assert tb1.status is TaskStatus.COMPLETED
        assert tb1.planned_hours == 8.0
        assert tb1.updated_at.hour == 20

    def test_phase_filter(self, fixture_db_path):
        tasks = SQLiteTaskSource(fixture_db_path).list_tasks("tower-a", phase="design")
        assert [t.id for t in tasks] == ["ta-2"]

    def test_all_phases(self, fixture_db_path):
        assert len(SQLiteTaskSource(fixture_db_path).list_tasks("tower-a", phase="all")) == 4

    def test_unknown_phase(self, fixture_db_path):
        with pytest.raises(ValueError, match="demolition"):
            SQLiteTaskSource(fixture_db_path).list_tasks("tower-a", phase="demolition")

    def test_unknown_project(self, fixture_db_path):
        assert SQLiteTaskSource(fixture_db_path).list_tasks("nope") == []

    def test_missing_database(self, tmp_path):
        with pytest.raises(TaskSourceError, match="not found"):
            SQLiteTaskSource(tmp_path / "absent.db").list_tasks("tower-a")

    def test_missing_table(self, tmp_path):
        db = tmp_path / "empty.db"
        conn = sqlite3.connect(str(db))
        conn.execute("CREATE TABLE projects (id TEXT)")
        conn.commit()
        conn.close()
        with pytest.raises(TaskSourceError):
            SQLiteTaskSource(db).list_tasks("tower-a")

    def test_default_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SITE_TIMELINE_DB", str(tmp_path / "site.db"))
        assert SQLiteTaskSource().db_path == (tmp_path / "site.db").resolve()

    def test_default_source_leaves_home_untouched(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SITE_TIMELINE_HOME", str(tmp_path / "home"))
        monkeypatch.delenv("SITE_TIMELINE_DB", raising=False)
        with pytest.raises(TaskSourceError, match="not found"):
            SQLiteTaskSource().list_tasks("tower-a")
        assert not (tmp_path / "home").exists()


class TestInMemoryTaskSource:
    def test_sorted_by_creation(self):
        source = InMemoryTaskSource(
            {"p": [make_task("late", created_at=day(5)), make_task("early", created_at=day(1))]}
        )
        assert [t.id for t in source.list_tasks("p")] == ["early", "late"]

    def test_unknown_project(self):
        assert InMemoryTaskSource().list_tasks("p") == []

    def test_from_json_projects_layout(self):
        source = InMemoryTaskSource.from_file(SEED_PATH)
        assert len(source.list_tasks("tower-a")) == 4
        assert [t.id for t in source.list_tasks("tower-a", "execution")] == ["ta-4"]

    def test_from_yaml_row_list(self, tmp_path):
        path = tmp_path / "tasks.yaml"
        path.write_text(
            "- id: y1\n"
            "  project_id: p1\n"
            "  created_at: 2026-03-02T00:00:00Z\n"
            "  priority: urgent\n"
            "- id: y2\n"
            "  project_id: p2\n"
            "  created_at: '2026-03-03'\n"
        )
        source = InMemoryTaskSource.from_file(path)
        assert [t.id for t in source.list_tasks("p1")] == ["y1"]
        assert [t.id for t in source.list_tasks("p2")] == ["y2"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(TaskSourceError):
            InMemoryTaskSource.from_file(tmp_path / "absent.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(TaskSourceError):
            InMemoryTaskSource.from_file(path)

    def test_unrecognized_layout(self, tmp_path):
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"tasks": []}))
        with pytest.raises(TaskSourceError, match="layout"):
            InMemoryTaskSource.from_file(path)

    def test_row_without_id(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"project_id": "p", "created_at": "2026-03-02"}]))
        with pytest.raises(InvalidTaskRecord):
            InMemoryTaskSource.from_file(path)
