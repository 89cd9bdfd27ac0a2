"""Shared data models (TypedDict) for event content."""
from __future__ import annotations

from typing import TypedDict


class EventRecord(TypedDict):
    """A content record after schema validation and default filling."""

    id: str
    delta: str | None
    summary: str
    description: str
    images: list[str]
    tags: list[str]


class Event(EventRecord):
    """An event as served to the timeline, with its derived metadata."""

    index: int
    source: str
    season: int | None
    episode: int | None
    characters: list[str]
    locations: list[str]
