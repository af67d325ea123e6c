from __future__ import annotations

import re

from scenario_report.logging_utils import RichConsoleRenderer

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _render(event_dict: dict) -> str:
    return ANSI.sub("", RichConsoleRenderer()(None, "info", event_dict))


def test_renderer_lines_up_key_values() -> None:
    line = _render({"event": "step_started", "level": "debug", "timestamp": "2026-01-01T00:00:00", "step": "a", "timestamp_ms": 5})

    assert line.startswith("2026-01-01T00:00:00 [debug   ] step_started")
    assert line.endswith("step=a timestamp_ms=5")


def test_renderer_skips_stack_without_trailing_space() -> None:
    line = _render({"event": "event_stream_rejected", "level": "error", "reason": "bad", "stack": "Traceback ..."})

    assert line.endswith("reason=bad")
    assert "Traceback" not in line
