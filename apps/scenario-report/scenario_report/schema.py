"""Pydantic models describing the emitted JSON report."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def as_serializable(self) -> dict[str, Any]:
        """Return the camelCase JSON form; unset optional fields are left out."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ErrorStackFrame(_ReportModel):
    declaring_class: str = Field(alias="declaringClass")
    method_name: str = Field(alias="methodName")
    file_name: str = Field(alias="fileName")
    line_number: int = Field(alias="lineNumber")


class ErrorReport(_ReportModel):
    error_type: str = Field(alias="errorType")
    message: str
    stack_trace: list[ErrorStackFrame] = Field(default_factory=list, alias="stackTrace")


class ScreenshotReport(_ReportModel):
    screenshot: str


class StepReportModel(_ReportModel):
    description: str
    start_time: int = Field(alias="startTime")
    duration: Optional[int] = None
    result: Optional[str] = None
    children: list[StepReportModel] = Field(default_factory=list)
    exception: Optional[ErrorReport] = None
    screenshots: Optional[list[ScreenshotReport]] = None


class UserStory(_ReportModel):
    id: str
    story_name: str = Field(alias="storyName")
    path: str
    type: str = "feature"


class ScenarioReportModel(_ReportModel):
    """Top-level report for one scenario."""

    name: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    start_time: int = Field(alias="startTime")
    manual: bool = False
    duration: Optional[int] = None
    result: Optional[str] = None
    test_steps: list[StepReportModel] = Field(default_factory=list, alias="testSteps")
    user_story: UserStory = Field(alias="userStory")
    test_failure_cause: Optional[ErrorReport] = Field(default=None, alias="testFailureCause")
