from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Callable

import pytest

from content.loader import clear_cache


def make_event(
    summary: str,
    *,
    delta: str | None = None,
    season: int | None = None,
    episode: int | None = None,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Return a schema-valid raw event record."""
    all_tags = list(tags or [])
    if season is not None:
        all_tags.append(f"season:{season}")
    if episode is not None:
        all_tags.append(f"episode:{episode}")
    record: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "delta": delta,
        "summary": summary,
        "description": f"{summary} description.",
        "images": [],
        "tags": all_tags,
    }
    record.update(extra)
    return record


@pytest.fixture()
def event_factory() -> Callable[..., dict[str, Any]]:
    return make_event


@pytest.fixture()
def write_events(tmp_path: Path) -> Callable[..., Path]:
    def write(records: Any, name: str = "season-1.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(records), encoding="utf-8")
        return path

    return write


@pytest.fixture(autouse=True)
def _fresh_event_cache():
    clear_cache()
    yield
    clear_cache()
