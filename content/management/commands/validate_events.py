from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from content.loader import events_files
from content.validation import validate_files


class Command(BaseCommand):
    help = "Validate event content files against the schema and check ids are unique."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "paths",
            nargs="*",
            type=Path,
            help="Content files to validate. Defaults to the configured events files.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        paths = options["paths"] or events_files()
        if not paths:
            raise CommandError("No event files found to validate.")

        self.stdout.write(f"Validating {len(paths)} file(s)...")
        report = validate_files(paths)

        if not report.ok:
            for message in report.messages():
                self.stderr.write(f"  - {message}")
            raise CommandError(
                f"Schema validation failed: {len(report.violations)} violation(s), "
                f"{len(report.duplicates)} duplicate id(s)."
            )

        self.stdout.write(self.style.SUCCESS(f"Schema validation passed! {report.event_count} event(s) checked."))
