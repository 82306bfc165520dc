"""Root of the vecsearch exception hierarchy.

``VecSearchError`` records where it was constructed and which lower-level
exception (if any) it wraps, and renders both through ``to_dict`` so the
CLI and the JSON log formatter share one error shape.
"""

import sys
import traceback
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from types import FrameType
from typing import Any

UNKNOWN = "<unknown>"


@dataclass(frozen=True)
class RaiseSite:
    """Code location that constructed an exception."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "RaiseSite":
        if frame is None:
            return cls(UNKNOWN, UNKNOWN, UNKNOWN, 0)
        owner = frame.f_locals.get("self")
        path = frame.f_code.co_filename.replace("\\", "/")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=path.rsplit("/", 1)[-1],
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            "class": data["class_name"],
            "method": data["method_name"],
            "file": data["file_name"],
            "line": data["line_number"],
            "timestamp": data["timestamp"],
        }


def _is_error_constructor(frame: FrameType) -> bool:
    return frame.f_code.co_name == "__init__" and isinstance(
        frame.f_locals.get("self"), VecSearchError
    )


class VecSearchError(Exception):
    """Base class for every error vecsearch raises.

    Subclasses only set ``error_code``; the code prefix names the family
    (``VS_CFG``, ``VS_EMB``, ``VS_VEC``, ``VS_VAL``, ``VS_DOC``).

    Example:
        try:
            connection.execute(stmt)
        except OperationalError as e:
            raise StoreConnectionError(
                "Lost connection to the vector database",
                cause=e,
                context={"table": table_name},
            ) from e
    """

    error_code: str = "VS_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context) if context else {}
        self.location = RaiseSite.from_frame(self._raise_frame())
        self.stack_trace = self._cause_trace(cause)

    @staticmethod
    def _raise_frame() -> FrameType | None:
        # Walk out of this helper and every __init__ in the subclass chain
        frame = sys._getframe(1)
        while frame is not None and _is_error_constructor(frame):
            frame = frame.f_back
        return frame

    @staticmethod
    def _cause_trace(cause: Exception | None) -> list[str] | None:
        """Trace lines of a cause that was actually raised, else None."""
        if cause is None or cause.__traceback__ is None:
            return None
        lines = traceback.format_exception(type(cause), cause, cause.__traceback__)
        return [line.rstrip() for chunk in lines for line in chunk.splitlines() if line.strip()]

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Structured form used by ``--json`` output and JSON logs.

        Args:
            include_trace: Add the wrapped cause's stack trace when there is one.
        """
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }
        if self.extra_context:
            result["context"] = dict(self.extra_context)
        if include_trace and self.stack_trace:
            result["stack_trace"] = list(self.stack_trace)
        if self.cause is not None:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        return result
