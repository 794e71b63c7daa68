"""
Test configuration - ensures repo root is in sys.path + shared fixtures.

This allows tests to import the top-level packages (timeline, api, cli) and
the builders in tests/fixtures. Timeline tests never read the clock: every
"now" is an explicit value.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import timeline.*, api.*, cli.*, tests.fixtures
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from timeline.config import TimelineSettings, reset_settings_cache  # noqa: E402
from tests.fixtures import create_fixture_db  # noqa: E402


@pytest.fixture
def settings() -> TimelineSettings:
    """Default engine settings, independent of any config file on disk."""
    return TimelineSettings()


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    """Each test starts without cached settings."""
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def fixture_db_path(tmp_path):
    """Seeded tasks database in a temp dir."""
    db_path = tmp_path / "fixture.db"
    conn = create_fixture_db(db_path)
    conn.close()
    return db_path


@pytest.fixture
def restore_root_logger():
    """configure_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
