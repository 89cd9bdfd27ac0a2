"""Build-time validation of event content files."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from weisus.utils import read_json

from .models import EventRecord
from .schema import clean_event

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Violation:
    source: str
    index: int | None
    field: str
    message: str

    def __str__(self) -> str:
        location = self.source if self.index is None else f"{self.source}[{self.index}]"
        return f"{location} {self.field}: {self.message}"


@dataclass(slots=True, frozen=True)
class DuplicateId:
    id: str
    indices: tuple[int, ...]
    sources: tuple[str, ...]

    def __str__(self) -> str:
        where = ", ".join(f"{source}@{index}" for source, index in zip(self.sources, self.indices))
        return f"duplicate id {self.id} at indices {list(self.indices)} ({where})"


@dataclass(slots=True, frozen=True)
class ValidationReport:
    files: tuple[str, ...]
    event_count: int
    events: tuple[EventRecord, ...] = ()
    violations: tuple[Violation, ...] = ()
    duplicates: tuple[DuplicateId, ...] = ()
    sources: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations and not self.duplicates

    def messages(self) -> list[str]:
        return [str(v) for v in self.violations] + [str(d) for d in self.duplicates]


def extract_records(data: Any) -> list[Any] | None:
    """Return the event list of a content file: a bare array or ``{"events": [...]}``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("events"), list):
        return data["events"]
    return None


def validate_records(
    records: Sequence[Any], source: str = "<memory>", offset: int = 0
) -> tuple[list[EventRecord], list[Violation]]:
    """Validate raw records, returning the cleaned events and every violation found.

    Violation indices are offset by *offset* so they line up with the merged
    collection when several files are validated together.
    """
    events: list[EventRecord] = []
    violations: list[Violation] = []
    for position, record in enumerate(records):
        event, errors = clean_event(record)
        if event is not None:
            events.append(event)
            continue
        for field_name, messages in errors.items():
            for message in messages:
                violations.append(Violation(source, offset + position, field_name, message))
    return events, violations


def find_duplicate_ids(records: Iterable[Any]) -> dict[str, list[int]]:
    """Map every id that occurs more than once to the indices where it occurs."""
    positions: dict[str, list[int]] = defaultdict(list)
    for index, record in enumerate(records):
        if isinstance(record, dict) and isinstance(record.get("id"), str):
            positions[record["id"]].append(index)
    return {event_id: indices for event_id, indices in positions.items() if len(indices) > 1}


def validate_files(paths: Iterable[Path]) -> ValidationReport:
    """Validate each content file and the uniqueness of ids across all of them."""
    files: list[str] = []
    merged: list[Any] = []
    record_sources: list[str] = []
    events: list[EventRecord] = []
    violations: list[Violation] = []

    for path in paths:
        source = str(path)
        files.append(source)
        try:
            data = read_json(Path(path))
        except (OSError, ValueError) as exc:
            violations.append(Violation(source, None, "__file__", str(exc)))
            continue

        records = extract_records(data)
        if records is None:
            violations.append(
                Violation(source, None, "__file__", 'Expected a JSON array of events or an object with an "events" array.')
            )
            continue

        file_events, file_violations = validate_records(records, source, offset=len(merged))
        events.extend(file_events)
        violations.extend(file_violations)
        merged.extend(records)
        record_sources.extend([source] * len(records))

    duplicates = tuple(
        DuplicateId(
            id=event_id,
            indices=tuple(indices),
            sources=tuple(record_sources[i] for i in indices),
        )
        for event_id, indices in find_duplicate_ids(merged).items()
    )

    report = ValidationReport(
        files=tuple(files),
        event_count=len(merged),
        events=tuple(events),
        violations=tuple(violations),
        duplicates=duplicates,
        sources=tuple(record_sources),
    )
    if report.ok:
        logger.info("Validated %s event(s) across %s file(s)", report.event_count, len(files))
    else:
        logger.warning(
            "Content validation failed: %s violation(s), %s duplicate id(s)",
            len(report.violations),
            len(report.duplicates),
        )
    return report
