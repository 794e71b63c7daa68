"""
Tests for structured logging and request ID propagation.
"""

import json
import logging
import sys

import pytest

from timeline import observability
from timeline.observability import (
    HumanFormatter,
    JSONFormatter,
    configure_logging,
    configure_logging_from_env,
    current_request_id,
    request_scope,
)


def make_record(msg="Laid out 4 tasks", level=logging.INFO, **extra):
    record = logging.LogRecord("timeline.gantt", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_core_fields(self):
        out = json.loads(JSONFormatter().format(make_record()))
        assert out["level"] == "INFO"
        assert out["logger"] == "timeline.gantt"
        assert out["message"] == "Laid out 4 tasks"
        assert out["timestamp"].endswith("Z")
        assert "request_id" not in out

    def test_extra_fields(self):
        out = json.loads(JSONFormatter().format(make_record(project_id="tower-a", tasks=4)))
        assert out["project_id"] == "tower-a"
        assert out["tasks"] == 4

    def test_request_id(self):
        with request_scope("req-abc123"):
            out = json.loads(JSONFormatter().format(make_record()))
        assert out["request_id"] == "req-abc123"

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()
        out = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in out["exception"]


class TestHumanFormatter:
    def test_line(self):
        with request_scope("req-0123456789abcdef"):
            line = HumanFormatter().format(make_record(level=logging.WARNING))
        assert "[WARNING] timeline.gantt: [req-01234567] Laid out 4 tasks" in line


class TestRequestScope:
    def test_scoped(self):
        assert current_request_id() is None
        with request_scope() as request_id:
            assert current_request_id() == request_id
        assert current_request_id() is None

    def test_nested(self):
        with request_scope("outer"):
            with request_scope("inner"):
                assert current_request_id() == "inner"
            assert current_request_id() == "outer"

    def test_generated_format(self):
        with request_scope() as request_id:
            assert request_id.startswith("req-")
            assert len(request_id) == 20

    def test_reset_after_error(self):
        with pytest.raises(RuntimeError):
            with request_scope("req-failing"):
                raise RuntimeError("layout failed")
        assert current_request_id() is None


class TestPublicSurface:
    @pytest.mark.parametrize("name", ["get_logger", "set_request_id", "RequestContext"])
    def test_not_exported(self, name):
        assert name not in observability.__all__
        assert not hasattr(observability, name)


class TestConfigureLogging:
    def test_sets_level_and_single_handler(self, restore_root_logger):
        configure_logging("debug", json_format=True)
        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_bad_level(self, restore_root_logger):
        with pytest.raises(ValueError, match="LOUD"):
            configure_logging("LOUD")

    def test_from_env(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.setenv("LOG_FORMAT", "human")
        configure_logging_from_env()
        assert restore_root_logger.level == logging.ERROR
        assert isinstance(restore_root_logger.handlers[0].formatter, HumanFormatter)
