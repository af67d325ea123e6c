"""Domain model and events consumed by the report reducer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Generic, Optional, TypeVar, Union


class Result(str, Enum):
    """Terminal result of a scenario or step."""

    COMPROMISED = "COMPROMISED"
    ERROR = "ERROR"
    FAILURE = "FAILURE"
    SKIPPED = "SKIPPED"
    IGNORED = "IGNORED"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"


@dataclass(frozen=True)
class Screenshot:
    path: str


@dataclass(frozen=True)
class Scenario:
    """One executable test case."""

    id: str
    name: str
    category: str
    path: str


@dataclass(eq=False)
class Step:
    """One action or assertion; screenshots keep arriving while it runs."""

    name: str
    promised_screenshots: list[Awaitable[Screenshot]] = field(default_factory=list)


T = TypeVar("T", Scenario, Step)


@dataclass
class Outcome(Generic[T]):
    subject: T
    result: Result
    error: Optional[BaseException] = None


@dataclass
class ScenarioStarted:
    value: Scenario
    timestamp: int


@dataclass
class StepStarted:
    value: Step
    timestamp: int


@dataclass
class StepCompleted:
    value: Outcome[Step]
    timestamp: int


@dataclass
class ScenarioCompleted:
    value: Outcome[Scenario]
    timestamp: int


DomainEvent = Union[ScenarioStarted, StepStarted, StepCompleted, ScenarioCompleted]
