from __future__ import annotations

import io

import pytest

from scenario_report.console_reporter import ConsoleReporter
from scenario_report.output_config import OutputFormat, get_log_format, get_log_level, get_output_format

REPORTS = [
    {
        "name": "Adds an item",
        "result": "SUCCESS",
        "duration": 120,
        "testSteps": [{"description": "outer", "children": [{"description": "inner", "children": []}]}],
    },
    {"name": "Never finished", "testSteps": []},
]


def test_plain_summary_counts_nested_steps() -> None:
    stream = io.StringIO()

    ConsoleReporter(OutputFormat.PLAIN, stream=stream).report_scenarios(REPORTS)

    output = stream.getvalue()
    assert "SUCCESS      Adds an item (2 steps, 120ms)" in output
    assert "UNFINISHED   Never finished (0 steps, -)" in output
    assert "Scenarios: 2 | Succeeded: 1 | Other: 1" in output


def test_rich_summary_renders_table() -> None:
    stream = io.StringIO()

    ConsoleReporter(OutputFormat.RICH, stream=stream).report_scenarios(REPORTS)

    output = stream.getvalue()
    assert "Adds an item" in output
    assert "Succeeded: 1" in output


def test_json_format_prints_nothing() -> None:
    stream = io.StringIO()

    ConsoleReporter(OutputFormat.JSON, stream=stream).report_scenarios(REPORTS)

    assert stream.getvalue() == ""


def test_auto_is_plain_when_not_a_terminal() -> None:
    assert ConsoleReporter(OutputFormat.AUTO, stream=io.StringIO()).use_rich is False


def test_output_format_priority(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONSOLE_OUTPUT_FORMAT", "plain")

    assert get_output_format("JSON") is OutputFormat.JSON
    assert get_output_format("bogus") is OutputFormat.PLAIN
    assert get_output_format() is OutputFormat.PLAIN

    monkeypatch.delenv("CONSOLE_OUTPUT_FORMAT")
    assert get_output_format() is OutputFormat.AUTO


def test_log_format_and_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SCENARIO_REPORT_LOG_LEVEL", raising=False)

    assert get_log_format(OutputFormat.JSON) == "json"
    assert get_log_format(OutputFormat.PLAIN) == "plain"
    assert get_log_format(OutputFormat.RICH) == "console"
    assert get_log_level() == "WARNING"
    assert get_log_level("debug") == "DEBUG"
