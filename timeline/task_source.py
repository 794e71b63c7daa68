"""
Task sources - where task snapshots come from.

The engine only ever reads: list_tasks(project_id, phase) returns a list of
TaskRecord ordered by creation instant. Two implementations:

- InMemoryTaskSource: fixed records per project (tests, CLI files)
- SQLiteTaskSource: read-only view of a `tasks` table
"""

import json
import logging
import sqlite3
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

import yaml

from timeline import paths
from timeline.errors import InvalidTaskRecord, TaskSourceError
from timeline.models import TaskRecord
from timeline.records import ALL_PHASES, filter_by_phase, parse_phase, task_from_row

logger = logging.getLogger(__name__)


class TaskSource(Protocol):
    def list_tasks(self, project_id: str, phase=None) -> list[TaskRecord]: ...


class InMemoryTaskSource:
    """Records held in memory, keyed by project id."""

    def __init__(self, projects: Mapping[str, Iterable[TaskRecord]] | None = None):
        self._projects = {pid: list(tasks) for pid, tasks in (projects or {}).items()}

    def list_tasks(self, project_id: str, phase=None) -> list[TaskRecord]:
        tasks = sorted(self._projects.get(project_id, []), key=lambda t: t.created_at)
        return filter_by_phase(tasks, phase)

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryTaskSource":
        """
        Load task rows from a JSON or YAML file.

        Accepted shapes:
            {"projects": {"<project_id>": [row, ...], ...}}
            [row, ...]  (rows carry their own "project_id")
        """
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
            if p.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise TaskSourceError(f"Cannot read task file {p}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("projects"), dict):
            grouped = data["projects"]
        elif isinstance(data, list):
            grouped = {}
            for row in data:
                if not isinstance(row, dict):
                    raise InvalidTaskRecord(f"task row must be a mapping, got {type(row).__name__}")
                grouped.setdefault(str(row.get("project_id") or ""), []).append(row)
        else:
            raise TaskSourceError(f"Unrecognized task file layout in {p}")

        projects = {}
        for project_id, rows in grouped.items():
            projects[str(project_id)] = [task_from_row(row) for row in rows or []]
        logger.info(f"Loaded {sum(len(v) for v in projects.values())} tasks from {p}")
        return cls(projects)


class SQLiteTaskSource:
    """
    Read-only access to a SQLite `tasks` table.

    Expects the record store's column names; columns a given
    database lacks are simply absent from the row and default downstream.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path) if db_path else paths.db_path()

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        if not self.db_path.exists():
            raise TaskSourceError(f"Task database not found: {self.db_path}")
        try:
            conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise TaskSourceError(f"Cannot open task database {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def list_tasks(self, project_id: str, phase=None) -> list[TaskRecord]:
        query = "SELECT * FROM tasks WHERE project_id = ?"
        params: list = [project_id]

        if phase is not None and phase != ALL_PHASES:
            wanted = parse_phase(phase)
            if wanted is None:
                raise ValueError(f"Unknown project phase: {phase!r}")
            query += " AND phase = ?"
            params.append(wanted.value)

        query += " ORDER BY created_at ASC"

        with self._connect() as conn:
            try:
                rows = conn.execute(query, params).fetchall()
            except sqlite3.Error as e:
                raise TaskSourceError(f"Task query failed: {e}") from e

        tasks = [task_from_row(dict(row)) for row in rows]
        logger.debug(f"Fetched {len(tasks)} tasks for project {project_id}")
        return tasks
