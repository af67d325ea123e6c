"""Hand finished reports to an output sink."""

from __future__ import annotations

from typing import Any, Awaitable, Protocol


class Outlet(Protocol):
    """Writes a JSON-serializable value somewhere and resolves to where it went."""

    def send_json(self, path: str, value: Any) -> Awaitable[str]:
        ...


class Scribe:
    def __init__(self, outlet: Outlet) -> None:
        self._outlet = outlet

    def write(self, report: Any, path_to_file: str) -> Awaitable[str]:
        return self._outlet.send_json(path_to_file, report)
