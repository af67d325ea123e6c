"""Report tree nodes and their asynchronous JSON serialization."""

from __future__ import annotations

import asyncio
import os
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Generic, Optional, TypeVar

from .errors import ProtocolViolation
from .models import Outcome, Result, Scenario, Screenshot, Step
from .schema import (
    ErrorReport,
    ScenarioReportModel,
    ScreenshotReport,
    StepReportModel,
    UserStory,
)
from .stack_trace import error_report_of

T = TypeVar("T", Scenario, Step)
ItemT = TypeVar("ItemT")

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_NON_WORD_RUN = re.compile(r"[\s\W]+")


def slugify(name: str) -> str:
    """Turn a category such as ``UserLoginFeature`` into ``user-login-feature``."""

    dashed = _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()
    return _NON_WORD_RUN.sub("-", dashed).strip("-")


class ReportNode(ABC, Generic[T]):
    """Execution metadata shared by scenario and step reports."""

    def __init__(self, started_at: int) -> None:
        self.started_at = started_at
        self.children: list[StepReport] = []
        self.parent: Optional[ReportNode[Any]] = None
        self.result: Optional[Result] = None
        self.error: Optional[BaseException] = None
        self.duration: Optional[int] = None
        self._completed = False

    @property
    def is_open(self) -> bool:
        return not self._completed

    def append(self, report: StepReport) -> None:
        report.parent = self
        self.children.append(report)

    def completed_with(self, outcome: Outcome[T], finished_at: int) -> None:
        if self._completed:
            raise ProtocolViolation(f"{self!r} has already been completed")
        self.result = outcome.result
        self.error = outcome.error
        self.duration = finished_at - self.started_at
        self._completed = True

    async def to_json(self) -> dict[str, Any]:
        model = await self.to_model()
        return model.as_serializable()

    @abstractmethod
    async def to_model(self) -> ScenarioReportModel | StepReportModel:
        ...

    def _result_name(self) -> Optional[str]:
        return self.result.name if self.result is not None else None

    def _error_if_present(self) -> Optional[ErrorReport]:
        return error_report_of(self.error)

    async def _children_models(self) -> list[StepReportModel]:
        return list(await asyncio.gather(*(child.to_model() for child in self.children)))

    @staticmethod
    def _if_not_empty(items: list[ItemT]) -> Optional[list[ItemT]]:
        return items if items else None


class ScenarioReport(ReportNode[Scenario]):
    def __init__(self, scenario: Scenario, started_at: int) -> None:
        super().__init__(started_at)
        self.scenario = scenario

    def __repr__(self) -> str:
        return f"ScenarioReport(id={self.scenario.id!r}, name={self.scenario.name!r})"

    async def to_model(self) -> ScenarioReportModel:
        test_steps = await self._children_models()
        return ScenarioReportModel(
            name=self.scenario.name,
            title=self.scenario.name,
            start_time=self.started_at,
            duration=self.duration,
            result=self._result_name(),
            test_steps=test_steps,
            user_story=UserStory(
                id=slugify(self.scenario.category),
                story_name=self.scenario.category,
                path=_relative_to_cwd(self.scenario.path),
            ),
            test_failure_cause=self._error_if_present(),
        )


class StepReport(ReportNode[Step]):
    def __init__(self, step: Step, started_at: int) -> None:
        super().__init__(started_at)
        self.step = step
        self.promised_screenshots: list[Awaitable[Screenshot]] = list(step.promised_screenshots)

    def __repr__(self) -> str:
        return f"StepReport(name={self.step.name!r})"

    def completed_with(self, outcome: Outcome[Step], finished_at: int) -> None:
        super().completed_with(outcome, finished_at)
        # the outcome may carry the same Step that was started; only take what is new
        known = {id(promise) for promise in self.promised_screenshots}
        self.promised_screenshots.extend(
            promise for promise in outcome.subject.promised_screenshots if id(promise) not in known
        )

    async def to_model(self) -> StepReportModel:
        screenshots, children = await asyncio.gather(
            self._resolve_screenshots(),
            self._children_models(),
        )
        return StepReportModel(
            description=self.step.name,
            start_time=self.started_at,
            duration=self.duration,
            result=self._result_name(),
            children=children,
            exception=self._error_if_present(),
            screenshots=self._if_not_empty(screenshots),
        )

    async def _resolve_screenshots(self) -> list[ScreenshotReport]:
        resolved = await asyncio.gather(*self.promised_screenshots)
        return [ScreenshotReport(screenshot=os.path.basename(shot.path)) for shot in resolved]


def _relative_to_cwd(path: str) -> str:
    return os.path.relpath(path, os.getcwd()) if path else ""
