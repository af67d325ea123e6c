"""Stack frame extraction for errors attached to outcomes."""

from __future__ import annotations

import traceback
from types import CodeType
from typing import Optional

from .errors import RecordedError
from .schema import ErrorReport, ErrorStackFrame


def error_report_of(error: Optional[BaseException]) -> Optional[ErrorReport]:
    """Render an outcome error, or ``None`` so the field is left out of the report."""

    if error is None:
        return None
    return ErrorReport(
        error_type=error_type_of(error),
        message=message_of(error),
        stack_trace=stack_trace_of(error),
    )


def message_of(error: BaseException) -> str:
    # str(KeyError("x")) quotes the key
    if len(error.args) == 1 and isinstance(error.args[0], str):
        return error.args[0]
    return str(error)


def error_type_of(error: BaseException) -> str:
    if isinstance(error, RecordedError):
        return error.error_type
    return type(error).__name__


def stack_trace_of(error: BaseException) -> list[ErrorStackFrame]:
    """Frames of ``error`` innermost first."""

    if isinstance(error, RecordedError):
        return [ErrorStackFrame.model_validate(frame) for frame in error.frames]

    frames = [
        ErrorStackFrame(
            declaring_class=_declaring_class(frame.f_code),
            method_name=frame.f_code.co_name or "",
            file_name=frame.f_code.co_filename,
            line_number=lineno,
        )
        for frame, lineno in traceback.walk_tb(error.__traceback__)
    ]
    frames.reverse()
    return frames


def _declaring_class(code: CodeType) -> str:
    # "Klass.method" names a class; "outer.<locals>.inner" and "<module>" do not
    parts = code.co_qualname.split(".")
    if len(parts) > 1 and not parts[-2].startswith("<"):
        return parts[-2]
    return code.co_name or ""
