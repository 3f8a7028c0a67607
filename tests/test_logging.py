"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from payoffsage.config import BaseConfig
from payoffsage.logging_config import JSONFormatter, get_logger, setup_logging
from payoffsage.services.debts import Debt, PayoffPlan, project


def _record(**overrides) -> logging.LogRecord:
    values = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    values.update(overrides)
    record = logging.LogRecord(**values)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """Test that JSONFormatter correctly formats log records."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    """Test that JSONFormatter correctly handles exceptions."""
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_extra_fields():
    record = _record()
    record.strategy = "snowball"
    log_data = json.loads(JSONFormatter().format(record))
    assert log_data["extra"] == {"strategy": "snowball"}


def test_setup_logging(isolated_env):
    """Test that logging setup creates log files with rotation."""
    config = BaseConfig()

    logger = setup_logging(config)

    assert logger.name == "payoffsage"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = isolated_env / "logs" / "payoffsage.log"
    assert log_file.exists()

    project([Debt(id="card", balance=100000.0, annual_interest_rate=36.0)], PayoffPlan())
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    warning = next(e for e in entries if e["level"] == "WARNING")
    assert warning["logger"] == "payoffsage.services.debts"
    assert warning["extra"]["strategy"] == "avalanche"


def test_setup_logging_twice_does_not_duplicate_handlers(isolated_env):
    config = BaseConfig()
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger():
    """Test that get_logger returns properly namespaced loggers."""
    assert get_logger("module1").name == "payoffsage.module1"
    assert get_logger("payoffsage.cli").name == "payoffsage.cli"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(isolated_env, dev_mode):
    """Test that console logging level adjusts based on dev mode."""
    config = BaseConfig()
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
