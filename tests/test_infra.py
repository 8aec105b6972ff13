"""
Tests for structured logging and environment settings.
"""

import io
import json
import logging

import pytest


def make_record(msg="Test message", level=logging.INFO):
    return logging.LogRecord(
        name="scannability.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_package_logger():
    yield
    package_logger = logging.getLogger("scannability")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


class TestLogging:
    """Structured logging tests."""

    def test_json_formatter(self):
        from scannability.logging import JSONFormatter

        parsed = json.loads(JSONFormatter().format(make_record()))
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "scannability.test"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        from scannability.logging import JSONFormatter

        record = make_record("Scored document")
        record.score = 72
        record.preset_id = "notion"
        record.cache_hit = False
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["score"] == 72
        assert parsed["preset_id"] == "notion"
        assert parsed["cache_hit"] is False

    def test_json_formatter_ignores_unlisted_extras(self):
        from scannability.logging import JSONFormatter

        record = make_record()
        record.password = "hunter2"
        assert "password" not in json.loads(JSONFormatter().format(record))

    def test_json_formatter_exception(self):
        from scannability.logging import JSONFormatter

        try:
            raise ValueError("bad selector")
        except ValueError:
            import sys
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()
        parsed = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad selector" in parsed["exception"]

    def test_get_logger(self):
        from scannability.logging import get_logger
        log = get_logger("cli")
        assert log.name == "scannability.cli"

    def test_setup_logging_json(self, restore_package_logger):
        from scannability.logging import get_logger, setup_logging

        stream = io.StringIO()
        setup_logging(level="debug", fmt="json", stream=stream)
        get_logger("service").info("Preset changed", extra={"preset_id": "confluence"})
        parsed = json.loads(stream.getvalue().strip())
        assert parsed["message"] == "Preset changed"
        assert parsed["preset_id"] == "confluence"

    def test_setup_logging_text_and_level(self, restore_package_logger):
        from scannability.logging import get_logger, setup_logging

        stream = io.StringIO()
        package_logger = setup_logging(level="WARNING", fmt="text", stream=stream)
        assert package_logger.level == logging.WARNING
        log = get_logger("cache")
        log.info("hidden")
        log.warning("shown")
        out = stream.getvalue()
        assert "hidden" not in out
        assert "[WARNING ] scannability.cache: shown" in out

    def test_setup_logging_replaces_handlers(self, restore_package_logger):
        from scannability.logging import setup_logging

        setup_logging(stream=io.StringIO())
        package_logger = setup_logging(stream=io.StringIO())
        assert len(package_logger.handlers) == 1


class TestSettings:
    """Environment-backed configuration."""

    def test_defaults(self, monkeypatch):
        for name in (
            "SCANNABILITY_DEFAULT_PRESET",
            "SCANNABILITY_CACHE_TTL_MS",
            "SCANNABILITY_MAX_LINES_WITHOUT_ANCHOR",
        ):
            monkeypatch.delenv(name, raising=False)
        from scannability.config import Settings

        s = Settings()
        assert isinstance(s.CACHE_TTL_MS, int)
        assert s.LOG_FORMAT in ("json", "text")

    def test_frozen(self):
        from dataclasses import FrozenInstanceError
        from scannability.config import settings

        with pytest.raises(FrozenInstanceError):
            settings.CACHE_TTL_MS = 5

    def test_override(self):
        from scannability.config import Settings

        s = Settings(DEFAULT_PRESET="notion", MAX_LINES_WITHOUT_ANCHOR=8)
        assert s.DEFAULT_PRESET == "notion"
        assert s.MAX_LINES_WITHOUT_ANCHOR == 8
