from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from scenario_report.main import app

runner = CliRunner()

SCENARIO = {"id": "todo-1", "name": "Adds an item", "category": "TodoList", "path": "features/todo.feature"}


def _events_file(tmp_path: Path, records: list[dict]) -> Path:
    path = tmp_path / "events.jsonl"
    path.write_text("\n".join(json.dumps(record) for record in records), encoding="utf-8")
    return path


def _happy_records() -> list[dict]:
    return [
        {"type": "ScenarioStarted", "timestamp": 0, "scenario": SCENARIO},
        {"type": "StepStarted", "timestamp": 5, "step": {"name": "Enters the value"}},
        {"type": "StepCompleted", "timestamp": 9, "step": {"name": "Enters the value"}, "result": "SUCCESS"},
        {"type": "ScenarioCompleted", "timestamp": 12, "scenario": SCENARIO, "result": "SUCCESS"},
    ]


def test_render_prints_json_reports(tmp_path: Path) -> None:
    events = _events_file(tmp_path, _happy_records())

    result = runner.invoke(app, ["--events", str(events), "--output-format", "json"])

    assert result.exit_code == 0, result.output
    reports = json.loads(result.stdout)
    assert len(reports) == 1
    assert reports[0]["name"] == "Adds an item"
    assert reports[0]["duration"] == 12
    assert reports[0]["testSteps"][0]["duration"] == 4


def test_render_plain_summary(tmp_path: Path) -> None:
    events = _events_file(tmp_path, _happy_records())

    result = runner.invoke(app, ["--events", str(events), "--output-format", "plain"])

    assert result.exit_code == 0, result.output
    assert "Scenarios: 1 | Succeeded: 1 | Other: 0" in result.output


def test_render_rejects_out_of_order_events(tmp_path: Path) -> None:
    records = _happy_records()
    records[1], records[2] = records[2], records[1]
    events = _events_file(tmp_path, records)

    result = runner.invoke(app, ["--events", str(events), "--output-format", "plain"])

    assert result.exit_code == 1
    assert "no step is in progress" in result.output


def test_render_rejects_malformed_file(tmp_path: Path) -> None:
    events = _events_file(tmp_path, [{"type": "ScenarioStarted", "timestamp": 0}])

    result = runner.invoke(app, ["--events", str(events)])

    assert result.exit_code == 2


def test_render_rejects_non_string_event_type(tmp_path: Path) -> None:
    events = _events_file(tmp_path, [{"type": ["ScenarioStarted"], "timestamp": 0}])

    result = runner.invoke(app, ["--events", str(events)])

    assert result.exit_code == 2
