from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "SITE_TIMELINE_HOME"
APP_ENV_DB = "SITE_TIMELINE_DB"
APP_ENV_CONFIG = "SITE_TIMELINE_CONFIG"


def app_home() -> Path:
    """
    User-writable home for the timeline service.
    Override with SITE_TIMELINE_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".site_timeline").resolve()


def default_config_path() -> Path:
    """Settings file installed with the package."""
    return Path(__file__).parent / "data" / "timeline.yaml"


def config_path() -> Path:
    """
    Engine settings file.

    Resolution order:
    1. SITE_TIMELINE_CONFIG env var (explicit override)
    2. timeline/data/timeline.yaml (shipped defaults)
    """
    if os.environ.get(APP_ENV_CONFIG):
        return Path(os.environ[APP_ENV_CONFIG]).expanduser().resolve()
    return default_config_path()


def db_path() -> Path:
    """
    Task record store (read-only for the engine).

    Resolution order:
    1. SITE_TIMELINE_DB env var (explicit override)
    2. ~/.site_timeline/data/site_timeline.db (default)

    Only resolves the location; nothing is created on disk.
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return app_home() / "data" / "site_timeline.db"
