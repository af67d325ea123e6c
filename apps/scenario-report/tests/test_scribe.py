from __future__ import annotations

import asyncio
from typing import Any

from scenario_report.scribe import Scribe


class RecordingOutlet:
    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []

    async def send_json(self, path: str, value: Any) -> str:
        self.sent.append((path, value))
        return path


def test_scribe_sends_report_to_outlet() -> None:
    outlet = RecordingOutlet()
    report = {"name": "Adds an item", "testSteps": []}

    written = asyncio.run(Scribe(outlet).write(report, "reports/adds-an-item.json"))

    assert written == "reports/adds-an-item.json"
    assert outlet.sent == [("reports/adds-an-item.json", report)]
