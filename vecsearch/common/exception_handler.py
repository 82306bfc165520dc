"""Turning exceptions into structured data, log records and exit codes.

The CLI is the only place errors stop propagating. It uses
``format_exception_json`` to render them and ``get_exit_code`` to choose
the process status, so every error family has a stable, scriptable exit
code.
"""

import logging
import traceback
from typing import Any

from ..core.domain.exceptions import (
    ConfigurationError,
    DocumentSourceError,
    InvalidArgumentError,
    ProviderError,
    StoreError,
    VecSearchError,
)

logger = logging.getLogger(__name__)

PYTHON_ERROR_CODE = "PYTHON_ERR"

EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_CONFIGURATION = 3
EXIT_PROVIDER = 4
EXIT_STORE = 5
EXIT_DOCUMENT = 6

# First matching family wins
_EXIT_CODES: tuple[tuple[type[VecSearchError], int], ...] = (
    (InvalidArgumentError, EXIT_INVALID_ARGUMENT),
    (ConfigurationError, EXIT_CONFIGURATION),
    (ProviderError, EXIT_PROVIDER),
    (StoreError, EXIT_STORE),
    (DocumentSourceError, EXIT_DOCUMENT),
)


def _short_filename(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


def _python_exception_dict(exc: BaseException, include_trace: bool) -> dict[str, Any]:
    """Same shape as ``VecSearchError.to_dict`` for exceptions we did not define."""
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last = frames[-1] if frames else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": PYTHON_ERROR_CODE,
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last.name if last else "<unknown>",
            "file": _short_filename(last.filename) if last else "<unknown>",
            "line": last.lineno if last else 0,
        },
    }
    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]
    return result


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Render any exception as a JSON-serialisable dict.

    Args:
        exc: The exception to render.
        include_trace: Include the formatted stack trace.
        extra_context: Merged into the ``context`` section.
    """
    if isinstance(exc, VecSearchError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = _python_exception_dict(exc, include_trace)

    if extra_context:
        result.setdefault("context", {}).update(extra_context)
    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log ``exc`` with its error code attached to the record.

    The JSON log formatter picks the code up from the record. The
    traceback is attached only when ``log`` is enabled for DEBUG.
    """
    code = get_error_code(exc)
    message = exc.message if isinstance(exc, VecSearchError) else str(exc)
    suffix = f" {extra_context}" if extra_context else ""
    log = log or logger
    exc_info = (type(exc), exc, exc.__traceback__) if log.isEnabledFor(logging.DEBUG) else None
    log.log(
        level,
        "%s [%s]: %s%s",
        type(exc).__name__,
        code,
        message,
        suffix,
        exc_info=exc_info,
        extra={"error_code": code},
    )


def get_error_code(exc: BaseException) -> str:
    """``VS_*`` code for our exceptions, ``PYTHON_ERR`` for anything else."""
    if isinstance(exc, VecSearchError):
        return exc.error_code
    return PYTHON_ERROR_CODE


def get_exit_code(exc: BaseException) -> int:
    """Process exit status for an error that reached the CLI."""
    for family, code in _EXIT_CODES:
        if isinstance(exc, family):
            return code
    return EXIT_FAILURE
