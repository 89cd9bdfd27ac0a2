"""
main.py

Command line entry point for the weisus timeline tools.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import django
from rich import print as rprint
from rich.logging import RichHandler
from typer import Argument, Exit, Option, Typer

app = Typer(help="Timeline content tools.")

logger = logging.getLogger(__name__)


@app.callback()
def callback(
        verbose: bool = Option(False, "-v", "--verbose", help='Show verbose output.')
):
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "weisus.settings")
    django.setup()

    level = "DEBUG" if verbose else "INFO"
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler()], force=True
    )
    for name in ("content", "timeline", "weisus"):
        logging.getLogger(name).setLevel(level)


@app.command()
def validate(
        paths: Optional[List[Path]] = Argument(None, help='Event JSON files. Defaults to the configured data files.'),
):
    """Validate event files against the content schema and check ids are unique."""
    from content.loader import events_files
    from content.validation import validate_files

    files = paths or events_files()
    if not files:
        rprint("[red]No event files found to validate.[/red]")
        raise Exit(code=1)

    report = validate_files(files)
    if not report.ok:
        rprint("[red]Schema validation failed:[/red]")
        for message in report.messages():
            rprint(f"  - {message}")
        raise Exit(code=1)

    rprint(f"[green]Schema validation passed![/green] {report.event_count} event(s) in {len(report.files)} file(s).")


@app.command()
def parse(expr: str = Argument(..., help='Delta expression, e.g. "1 week 2 days".')):
    """Print the number of hours a delta expression stands for."""
    from timeline.delta import parse_delta

    hours = parse_delta(expr)
    if hours is None:
        raise Exit(code=1)
    rprint(hours)


@app.command()
def diff(
        from_delta: str = Argument(..., help='Delta of the earlier reference point.'),
        to_delta: str = Argument(..., help='Delta to describe relative to the first.'),
):
    """Describe the time between two delta expressions."""
    from timeline.delta import diff_description

    description = diff_description(from_delta, to_delta)
    if description is None:
        raise Exit(code=1)
    rprint(description)


if __name__ == '__main__':
    app()
