"""Rebuild nested scenario reports from test-execution event streams."""

from .errors import EventFormatError, ProtocolViolation, ReportingError
from .models import (
    DomainEvent,
    Outcome,
    Result,
    Scenario,
    ScenarioCompleted,
    ScenarioStarted,
    Screenshot,
    Step,
    StepCompleted,
    StepStarted,
)
from .nodes import slugify
from .reducer import ScenarioReporter, ScenarioReports
from .scribe import Outlet, Scribe

__all__ = [
    "DomainEvent",
    "EventFormatError",
    "Outcome",
    "Outlet",
    "ProtocolViolation",
    "ReportingError",
    "Result",
    "Scenario",
    "ScenarioCompleted",
    "ScenarioReporter",
    "ScenarioReports",
    "ScenarioStarted",
    "Scribe",
    "Screenshot",
    "Step",
    "StepCompleted",
    "StepStarted",
    "slugify",
]
