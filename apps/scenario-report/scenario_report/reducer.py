"""Fold a stream of domain events into per-scenario report trees."""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Iterable, Optional

import structlog

from .errors import ProtocolViolation
from .models import (
    DomainEvent,
    Outcome,
    Scenario,
    ScenarioCompleted,
    ScenarioStarted,
    Step,
    StepCompleted,
    StepStarted,
)
from .nodes import ReportNode, ScenarioReport, StepReport

LOGGER = structlog.get_logger("scenario_report")


class ScenarioReporter:
    """Builds the nested JSON report for every scenario seen in an event stream."""

    async def report_on(self, events: Iterable[DomainEvent]) -> list[dict[str, Any]]:
        return await self.reduce(events).extract()

    @staticmethod
    def reduce(events: Iterable[DomainEvent]) -> ScenarioReports:
        return functools.reduce(_apply, events, ScenarioReports())


def _apply(reports: ScenarioReports, event: DomainEvent) -> ScenarioReports:
    match event:
        case ScenarioStarted(value=scenario, timestamp=timestamp):
            return reports.scenario_started(scenario, timestamp)
        case StepStarted(value=step, timestamp=timestamp):
            return reports.step_started(step, timestamp)
        case StepCompleted(value=outcome, timestamp=timestamp):
            return reports.step_completed(outcome, timestamp)
        case ScenarioCompleted(value=outcome, timestamp=timestamp):
            return reports.scenario_completed(outcome, timestamp)
        case _:
            LOGGER.debug("event_ignored", event_type=type(event).__name__)
            return reports


class ScenarioReports:
    """Report set plus the cursor pointing at the node accepting nested events.

    Only one node is open at a time, so scenarios have to arrive one after
    another; steps of two scenarios cannot be interleaved in the stream.
    """

    def __init__(self) -> None:
        self._reports: dict[str, ScenarioReport] = {}
        self._last: Optional[ReportNode[Any]] = None

    def __len__(self) -> int:
        return len(self._reports)

    def __getitem__(self, scenario_id: str) -> ScenarioReport:
        return self._reports[scenario_id]

    @property
    def cursor(self) -> Optional[ReportNode[Any]]:
        return self._last

    def scenario_started(self, scenario: Scenario, timestamp: int) -> ScenarioReports:
        logger = LOGGER.bind(scenario_id=scenario.id, timestamp=timestamp)
        if self._last is not None and self._last.is_open:
            logger.warning("scenario_started_while_open", open_report=repr(self._last))
        if scenario.id in self._reports:
            logger.warning("scenario_report_replaced")

        report = ScenarioReport(scenario, timestamp)
        self._reports[scenario.id] = report
        self._last = report
        logger.debug("scenario_started", name=scenario.name)
        return self

    def step_started(self, step: Step, timestamp: int) -> ScenarioReports:
        if self._last is None or not self._last.is_open:
            raise ProtocolViolation(f"Step '{step.name}' started outside of an open scenario or step")

        report = StepReport(step, timestamp)
        self._last.append(report)
        self._last = report
        LOGGER.debug("step_started", step=step.name, timestamp=timestamp)
        return self

    def step_completed(self, outcome: Outcome[Step], timestamp: int) -> ScenarioReports:
        current = self._last
        if not isinstance(current, StepReport) or not current.is_open:
            raise ProtocolViolation(f"Step '{outcome.subject.name}' completed but no step is in progress")

        current.completed_with(outcome, timestamp)
        self._last = current.parent
        LOGGER.debug(
            "step_completed",
            step=outcome.subject.name,
            result=outcome.result.name,
            duration=current.duration,
        )
        return self

    def scenario_completed(self, outcome: Outcome[Scenario], timestamp: int) -> ScenarioReports:
        scenario_id = outcome.subject.id
        report = self._reports.get(scenario_id)
        if report is None:
            raise ProtocolViolation(f"Scenario '{scenario_id}' completed but was never started")
        if not report.is_open:
            raise ProtocolViolation(f"Scenario '{scenario_id}' has already been completed")

        if isinstance(self._last, StepReport) and self._belongs_to(self._last, report):
            LOGGER.warning("scenario_completed_with_open_steps", scenario_id=scenario_id, open_step=repr(self._last))
            self._last = report

        report.completed_with(outcome, timestamp)
        LOGGER.debug(
            "scenario_completed",
            scenario_id=scenario_id,
            result=outcome.result.name,
            duration=report.duration,
        )
        return self

    async def extract(self) -> list[dict[str, Any]]:
        """Serialize every scenario, finished or not."""

        LOGGER.debug("reports_extracting", scenario_count=len(self._reports))
        return list(await asyncio.gather(*(report.to_json() for report in self._reports.values())))

    @staticmethod
    def _belongs_to(node: ReportNode[Any], root: ScenarioReport) -> bool:
        while node is not None:
            if node is root:
                return True
            node = node.parent
        return False
