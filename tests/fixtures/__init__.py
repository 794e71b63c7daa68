"""
Test fixtures for deterministic testing.

This module provides:
- tasks: TaskRecord builders anchored on DAY0
- fixture_db: Creates temp SQLite databases seeded from seed_tasks.json
"""

from .fixture_db import SEED_PATH, create_fixture_db, insert_task, load_seed_data
from .tasks import DAY0, day, make_task

__all__ = [
    "DAY0",
    "day",
    "make_task",
    "SEED_PATH",
    "create_fixture_db",
    "insert_task",
    "load_seed_data",
]
