"""Logging setup for vecsearch.

All package modules log through ``logging.getLogger(__name__)``, so they
sit under the ``vecsearch`` logger and inherit whatever ``setup_logging``
attaches there. Output goes to stderr so command results on stdout (for
example ``search --json``) stay machine readable.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "vecsearch"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that are chatty at INFO (one line per HTTP request or SQL statement)
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "sqlalchemy.engine")


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record.

    Records raised from a ``VecSearchError`` (or logged with an
    ``error_code`` extra) carry that code, so failures can be filtered
    by family without parsing messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        error_code = getattr(record, "error_code", None)

        if record.exc_info and record.exc_info[0] is not None:
            exc = record.exc_info[1]
            error_code = error_code or getattr(exc, "error_code", None)
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(exc) if exc else None,
                "traceback": self.formatException(record.exc_info),
            }

        if error_code:
            entry["error_code"] = error_code

        return json.dumps(entry, default=str)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONExceptionFormatter()
    return logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``vecsearch`` logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Level name for vecsearch's own loggers.
        log_file: Also write records to this file (parent dirs are created).
        json_format: Emit JSON lines instead of the pipe-separated format.

    Returns:
        The configured ``vecsearch`` logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = _build_formatter(json_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Client libraries only get through at DEBUG
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
        )

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``vecsearch`` logger or one of its children."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
