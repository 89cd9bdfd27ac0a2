"""Load and cache the event collection configured in settings."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from django.conf import settings

from timeline.catalog import SeasonCatalog
from weisus.utils import cache_token

from .models import Event, EventRecord
from .utils import tag_number, tag_values
from .validation import ValidationReport, validate_files

logger = logging.getLogger(__name__)

EVENTS_FILE_GLOB = "season-*.json"


class ContentError(Exception):
    """Raised when the configured content files fail validation."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        lines = "\n".join(f"  - {line}" for line in report.messages())
        super().__init__(f"Event content is invalid:\n{lines}")


@dataclass(slots=True, frozen=True)
class EventCollection:
    events: tuple[Event, ...]
    catalog: SeasonCatalog

    def get(self, event_id: str) -> Event | None:
        for event in self.events:
            if event["id"] == event_id:
                return event
        return None

    def __len__(self) -> int:
        return len(self.events)


def events_files() -> list[Path]:
    """Return the content files to load, in load order.

    ``EVENTS_FILES`` wins when set; otherwise every ``season-*.json`` in
    ``EVENTS_DATA_DIR`` is used, sorted by name.
    """
    explicit = getattr(settings, "EVENTS_FILES", None)
    if explicit:
        return [Path(p) for p in explicit]

    data_dir = Path(settings.EVENTS_DATA_DIR)
    if not data_dir.is_dir():
        logger.warning("Events directory not found: %s", data_dir)
        return []
    return sorted(data_dir.glob(EVENTS_FILE_GLOB), key=lambda p: p.name.lower())


def build_collection(records: Sequence[EventRecord], sources: Sequence[str] | None = None) -> EventCollection:
    """Attach derived metadata to validated records and build the catalog."""
    names = list(sources) if sources is not None else ["<memory>"] * len(records)
    events: list[Event] = []
    for index, (record, source) in enumerate(zip(records, names)):
        tags = record["tags"]
        events.append(
            {
                **record,
                "index": index,
                "source": Path(source).name,
                "season": tag_number(tags, "season"),
                "episode": tag_number(tags, "episode"),
                "characters": tag_values(tags, "character"),
                "locations": tag_values(tags, "location"),
            }
        )
    return EventCollection(events=tuple(events), catalog=SeasonCatalog.from_events(events))


@lru_cache(maxsize=8)
def _load_cached(keys: tuple[tuple[str, str], ...]) -> EventCollection:
    report = validate_files(Path(path) for path, _ in keys)
    if not report.ok:
        raise ContentError(report)
    collection = build_collection(report.events, report.sources)
    logger.info("Loaded %s event(s) from %s file(s)", len(collection), len(keys))
    return collection


def load_events() -> EventCollection:
    """Return the validated event collection, reloading when a file changes."""
    keys = tuple((str(path), cache_token(path)) for path in events_files())
    return _load_cached(keys)


def clear_cache() -> None:
    _load_cached.cache_clear()
