"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from bambou.core.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    structlog.reset_defaults()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestSetupLogging:
    def test_json_output(self, restore_logging, capsys):
        setup_logging(level="INFO", format_type="json")
        get_logger("bambou.tests.json").info("Session started", organization="acme")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Session started"
        assert record["organization"] == "acme"
        assert record["level"] == "info"

    def test_level_filters(self, restore_logging, capsys):
        setup_logging(level="WARNING", format_type="console")
        get_logger("bambou.tests.level").info("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_unknown_format(self, restore_logging):
        with pytest.raises(ValueError):
            setup_logging(format_type="xml")
