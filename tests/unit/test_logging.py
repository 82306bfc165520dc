"""Unit tests for logging configuration."""

import json
import logging
import sys

import pytest

from vecsearch.config.logging import (
    ROOT_LOGGER_NAME,
    JSONExceptionFormatter,
    get_logger,
    setup_logging,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logging.getLogger(ROOT_LOGGER_NAME).handlers.clear()


def test_setup_logging_is_idempotent():
    setup_logging("DEBUG")
    logger = setup_logging("WARNING")

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_log_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "vecsearch.log"
    logger = setup_logging("INFO", log_file=log_file)

    get_logger("tests").info("written to file")
    for handler in logger.handlers:
        handler.flush()

    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = logging.getLogger("x").makeRecord(
            "x", logging.ERROR, __file__, 1, "failed %s", ("op",), sys.exc_info()
        )

    entry = json.loads(JSONExceptionFormatter().format(record))

    assert entry["level"] == "ERROR"
    assert entry["message"] == "failed op"
    assert entry["exception"]["type"] == "ValueError"


def test_get_logger_names():
    assert get_logger().name == "vecsearch"
    assert get_logger("cli").name == "vecsearch.cli"
