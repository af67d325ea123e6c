"""Load recorded event streams from JSONL or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Generator, Literal, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .errors import EventFormatError, RecordedError
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
from .schema import ErrorStackFrame

LOGGER = structlog.get_logger("scenario_report")


class ScenarioRecord(BaseModel):
    id: str
    name: str
    category: str
    path: str


class StepRecord(BaseModel):
    name: str
    screenshots: list[str] = Field(default_factory=list)


class ErrorRecord(BaseModel):
    type: str = "Error"
    message: str = ""
    stack: list[ErrorStackFrame] = Field(default_factory=list)

    def to_error(self) -> RecordedError:
        frames = [frame.model_dump(by_alias=True) for frame in self.stack]
        return RecordedError(self.message, error_type=self.type, frames=frames)


class ScenarioStartedRecord(BaseModel):
    type: Literal["ScenarioStarted"]
    timestamp: int
    scenario: ScenarioRecord


class StepStartedRecord(BaseModel):
    type: Literal["StepStarted"]
    timestamp: int
    step: StepRecord


class StepCompletedRecord(BaseModel):
    type: Literal["StepCompleted"]
    timestamp: int
    step: StepRecord
    result: Result
    error: Optional[ErrorRecord] = None


class ScenarioCompletedRecord(BaseModel):
    type: Literal["ScenarioCompleted"]
    timestamp: int
    scenario: ScenarioRecord
    result: Result
    error: Optional[ErrorRecord] = None


EventRecord = Annotated[
    Union[ScenarioStartedRecord, StepStartedRecord, StepCompletedRecord, ScenarioCompletedRecord],
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(EventRecord)
KNOWN_EVENT_TYPES = frozenset({"ScenarioStarted", "StepStarted", "StepCompleted", "ScenarioCompleted"})


def load_events(path: Path) -> list[DomainEvent]:
    """Load and validate an event file, in the order the events were recorded."""

    raw_records = _read_records(path)
    builder = _EventBuilder()
    events: list[DomainEvent] = []

    for number, raw in enumerate(raw_records, start=1):
        if not isinstance(raw, dict):
            raise EventFormatError(f"{path}: record {number} must be a mapping")
        event_type = raw.get("type")
        if not isinstance(event_type, str):
            raise EventFormatError(f"{path}: record {number} has no event type name")
        if event_type not in KNOWN_EVENT_TYPES:
            LOGGER.warning("event_type_unknown", file=str(path), record=number, event_type=event_type)
            continue
        try:
            record = _EVENT_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            raise EventFormatError(f"{path}: record {number} is invalid: {exc}") from exc
        events.append(builder.build(record))

    LOGGER.debug("events_loaded", file=str(path), count=len(events))
    return events


def _read_records(path: Path) -> list[Any]:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    if suffix == ".jsonl":
        records = []
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise EventFormatError(f"{path}: line {number} is not valid JSON: {exc}") from exc
        return records

    if suffix in {".yaml", ".yml", ".json"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise EventFormatError(f"{path}: could not be parsed: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("events")
        if data is None:
            return []
        if not isinstance(data, list):
            raise EventFormatError(f"{path}: expected a list of events")
        return data

    raise EventFormatError(f"Unsupported event file format: {suffix}")


class _Captured:
    """A screenshot that was already on disk when the event was recorded."""

    def __init__(self, path: str) -> None:
        self._screenshot = Screenshot(path=path)

    def __await__(self) -> Generator[Any, None, Screenshot]:
        yield from ()
        return self._screenshot


class _EventBuilder:
    """Turns records into domain events, reusing one Step object per running step."""

    def __init__(self) -> None:
        self._running: list[Step] = []

    def build(self, record: Any) -> DomainEvent:
        if isinstance(record, ScenarioStartedRecord):
            return ScenarioStarted(value=_scenario(record.scenario), timestamp=record.timestamp)

        if isinstance(record, StepStartedRecord):
            step = Step(name=record.step.name)
            step.promised_screenshots.extend(_Captured(shot) for shot in record.step.screenshots)
            self._running.append(step)
            return StepStarted(value=step, timestamp=record.timestamp)

        if isinstance(record, StepCompletedRecord):
            step = self._finish(record.step)
            outcome = Outcome(subject=step, result=record.result, error=_error(record.error))
            return StepCompleted(value=outcome, timestamp=record.timestamp)

        outcome = Outcome(
            subject=_scenario(record.scenario),
            result=record.result,
            error=_error(record.error),
        )
        return ScenarioCompleted(value=outcome, timestamp=record.timestamp)

    def _finish(self, record: StepRecord) -> Step:
        for index in range(len(self._running) - 1, -1, -1):
            if self._running[index].name == record.name:
                step = self._running.pop(index)
                break
        else:
            step = Step(name=record.name)
        step.promised_screenshots.extend(_Captured(shot) for shot in record.screenshots)
        return step


def _scenario(record: ScenarioRecord) -> Scenario:
    return Scenario(id=record.id, name=record.name, category=record.category, path=record.path)


def _error(record: Optional[ErrorRecord]) -> Optional[BaseException]:
    return record.to_error() if record is not None else None
