"""CLI entrypoint for scenario-report."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer

if __package__ in {None, ""}:
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    __package__ = "scenario_report"

from .console_reporter import ConsoleReporter
from .errors import EventFormatError, ProtocolViolation
from .loader import load_events
from .logging_utils import configure_logging
from .output_config import get_log_format, get_log_level, get_output_format
from .reducer import ScenarioReporter

app = typer.Typer(help="Rebuild nested scenario reports from recorded test-execution events.")


@app.command()
def render(
    events: Path = typer.Option(
        ...,
        exists=True,
        readable=True,
        help="Recorded event stream (.jsonl, .yaml or .yml).",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        help="Summary format: auto, rich, plain or json (env CONSOLE_OUTPUT_FORMAT).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        help="Log level (env SCENARIO_REPORT_LOG_LEVEL, default WARNING).",
    ),
    indent: int = typer.Option(2, min=0, help="Indentation of the printed JSON."),
) -> None:
    """Print the JSON reports for every scenario found in EVENTS."""

    resolved_format = get_output_format(output_format)
    logger = configure_logging(get_log_level(log_level), get_log_format(resolved_format))
    reporter = ConsoleReporter(output_format=resolved_format)

    try:
        domain_events = load_events(events)
    except EventFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="--events") from exc

    try:
        reports = asyncio.run(ScenarioReporter().report_on(domain_events))
    except ProtocolViolation as exc:
        logger.error("event_stream_rejected", file=str(events), reason=str(exc))
        reporter.print_error(str(exc))
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(reports, indent=indent or None, ensure_ascii=False))
    reporter.report_scenarios(reports)


def run() -> None:
    """Console_scripts hook."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
