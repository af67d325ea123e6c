"""Console summary of generated scenario reports."""

import os
import sys
from typing import Any, Optional, TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .output_config import OutputFormat


class ConsoleReporter:
    """
    Summarises reports on stderr, adapting to the environment.

    Automatically detects:
    - Interactive terminals (use rich tables)
    - CI/CD environments (use plain text)
    - Pipe/redirect scenarios (use plain text)

    JSON output prints no summary at all, the reports themselves are the output.
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.AUTO, stream: Optional[TextIO] = None):
        self.output_format = output_format
        self.stream = stream or sys.stderr
        self._detect_environment()
        self.console = Console(file=self.stream) if self.use_rich else None

    def _detect_environment(self) -> None:
        """Detect if we should use rich output or plain text."""
        self.enabled = self.output_format != OutputFormat.JSON
        if self.output_format == OutputFormat.RICH:
            self.use_rich = True
        elif self.output_format in (OutputFormat.PLAIN, OutputFormat.JSON):
            self.use_rich = False
        else:  # AUTO
            is_terminal = self.stream.isatty()
            is_ci = any([
                'CI' in os.environ,
                'JENKINS_HOME' in os.environ,
                'GITLAB_CI' in os.environ,
                'TRAVIS' in os.environ,
            ])
            self.use_rich = is_terminal and not is_ci

    def report_scenarios(self, reports: list[dict[str, Any]]) -> None:
        """Print one line per scenario and the totals."""
        if not self.enabled:
            return

        succeeded = len([report for report in reports if report.get("result") == "SUCCESS"])
        other = len(reports) - succeeded

        if self.use_rich:
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Scenario", width=40)
            table.add_column("Result", width=12)
            table.add_column("Steps", justify="right", width=6)
            table.add_column("Duration", justify="right", width=12)
            for report in reports:
                result = report.get("result", "UNFINISHED")
                table.add_row(
                    report["name"],
                    Text(result, style="green" if result == "SUCCESS" else "red"),
                    str(_count_steps(report.get("testSteps", []))),
                    _duration_label(report),
                )

            summary_text = Text()
            summary_text.append(f"Scenarios: {len(reports)}  ", style="bold")
            summary_text.append(f"Succeeded: {succeeded}  ", style="bold green")
            summary_text.append(f"Other: {other}", style="bold red" if other else "bold green")

            self.console.print(table)
            self.console.print(Panel(summary_text, border_style="green" if other == 0 else "red"))
        else:
            for report in reports:
                result = report.get("result", "UNFINISHED")
                steps = _count_steps(report.get("testSteps", []))
                print(f"{result:<12} {report['name']} ({steps} steps, {_duration_label(report)})", file=self.stream)
            print("-" * 80, file=self.stream)
            print(f"Scenarios: {len(reports)} | Succeeded: {succeeded} | Other: {other}", file=self.stream)

    def print_error(self, message: str) -> None:
        """Print an error message."""
        if self.use_rich:
            self.console.print(f"[bold red]Error:[/] {message}")
        else:
            print(f"Error: {message}", file=self.stream)


def _count_steps(steps: list[dict[str, Any]]) -> int:
    return sum(1 + _count_steps(step.get("children", [])) for step in steps)


def _duration_label(report: dict[str, Any]) -> str:
    duration = report.get("duration")
    return f"{duration}ms" if duration is not None else "-"
