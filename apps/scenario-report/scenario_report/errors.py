"""Exceptions raised while turning events into reports."""

from __future__ import annotations

from typing import Any


class ReportingError(RuntimeError):
    """Base class for report generation failures."""


class ProtocolViolation(ReportingError):
    """An event arrived that the current cursor cannot accept."""


class EventFormatError(ReportingError):
    """A recorded event file could not be parsed."""


class RecordedError(Exception):
    """Error replayed from an event file, with the frames captured at the time."""

    def __init__(self, message: str, *, error_type: str, frames: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.frames = frames or []
