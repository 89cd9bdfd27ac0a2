"""Timeline service functions: ordering, spoiler hiding and page context."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, TypedDict

from django.urls import reverse

from content.loader import EventCollection
from content.models import Event

from .delta import diff_description, sort_by_delta
from .filters import LAYOUT_GRID, LAYOUT_LIST, FilterState


class TimelineEntry(TypedDict):
    """One row of the timeline as rendered."""

    event: Event
    position: int
    hidden: bool
    time_diff: str | None
    detail_url: str
    reveal_url: str | None


@dataclass(slots=True, frozen=True)
class TimelineContext:
    """Context data for rendering the timeline page."""

    entries: list[TimelineEntry]
    state: FilterState
    filtered: bool
    hidden_count: int
    seasons: list[int]
    episodes_by_season: dict[int, list[int]]
    list_url: str
    grid_url: str
    show_all_url: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class EventContext:
    """Context data for a single event page."""

    event: Event
    hidden: bool
    reveal_url: str | None
    previous: Event | None
    next: Event | None
    since_previous: str | None
    until_next: str | None
    query: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def is_spoiler(event: Event, state: FilterState) -> bool:
    """True when *event* airs after the viewer's season/episode position.

    A concealing state treats every event with a season tag as a spoiler.
    """
    season = event.get("season")
    if state.conceal:
        return season is not None
    if state.show_all or state.season is None or season is None:
        return False
    if season != state.season:
        return season > state.season
    episode = event.get("episode")
    if state.episode is None or episode is None:
        return False
    return episode > state.episode


def is_hidden(event: Event, state: FilterState) -> bool:
    return is_spoiler(event, state) and not state.is_revealed(event["id"], event["index"])


def ordered_events(collection: EventCollection) -> list[Event]:
    return sort_by_delta(collection.events)


def _url_with(base: str, state: FilterState) -> str:
    query = state.to_query()
    return f"{base}?{query}" if query else base


def build_timeline(collection: EventCollection, state: FilterState, *, filtered: bool = False) -> TimelineContext:
    """Assemble the timeline for *state*.

    Entries keep the chronological order of :func:`sort_by_delta`. Time
    differences are measured from the previous visible entry; hidden entries
    carry none.
    """
    index_url = reverse("timeline:index")
    entries: list[TimelineEntry] = []
    previous: Event | None = None

    for position, event in enumerate(ordered_events(collection)):
        hidden = is_hidden(event, state)
        time_diff = None
        if not hidden and previous is not None:
            time_diff = diff_description(previous["delta"], event["delta"])

        detail_url = _url_with(reverse("timeline:detail", kwargs={"event_id": event["id"]}), state)
        entries.append(
            {
                "event": event,
                "position": position,
                "hidden": hidden,
                "time_diff": time_diff,
                "detail_url": detail_url,
                "reveal_url": _url_with(index_url, state.with_revealed(event["id"])) if hidden else None,
            }
        )
        if not hidden:
            previous = event

    catalog = collection.catalog
    return TimelineContext(
        entries=entries,
        state=state,
        filtered=filtered,
        hidden_count=sum(1 for entry in entries if entry["hidden"]),
        seasons=list(catalog.seasons),
        episodes_by_season={season: list(episodes) for season, episodes in catalog.episodes_by_season.items()},
        list_url=_url_with(index_url, state.with_layout(LAYOUT_LIST)),
        grid_url=_url_with(index_url, state.with_layout(LAYOUT_GRID)),
        show_all_url=_url_with(index_url, FilterState(show_all=True, layout=state.layout)),
    )


def build_event_context(collection: EventCollection, event_id: str, state: FilterState) -> EventContext | None:
    """Return the page context for *event_id*, or None when it does not exist."""
    events = ordered_events(collection)
    for position, event in enumerate(events):
        if event["id"] != event_id:
            continue

        hidden = is_hidden(event, state)
        previous = next((e for e in reversed(events[:position]) if not is_hidden(e, state)), None)
        following = next((e for e in events[position + 1:] if not is_hidden(e, state)), None)

        reveal_url = None
        if hidden:
            reveal_url = _url_with(
                reverse("timeline:detail", kwargs={"event_id": event_id}), state.with_revealed(event_id)
            )

        return EventContext(
            event=event,
            hidden=hidden,
            reveal_url=reveal_url,
            previous=previous,
            next=following,
            since_previous=diff_description(previous["delta"], event["delta"]) if previous and not hidden else None,
            until_next=diff_description(event["delta"], following["delta"]) if following and not hidden else None,
            query=state.to_query(),
        )
    return None


def timeline_payload(context: TimelineContext) -> dict[str, Any]:
    """JSON-friendly version of the timeline; hidden events expose only their id."""
    items: list[dict[str, Any]] = []
    for entry in context.entries:
        event = entry["event"]
        if entry["hidden"]:
            items.append({"id": event["id"], "hidden": True})
            continue
        items.append(
            {
                "id": event["id"],
                "hidden": False,
                "delta": event["delta"],
                "summary": event["summary"],
                "description": event["description"],
                "images": event["images"],
                "tags": event["tags"],
                "season": event["season"],
                "episode": event["episode"],
                "time_diff": entry["time_diff"],
            }
        )

    state = context.state
    return {
        "filter": {
            "season": state.season,
            "episode": state.episode,
            "showAll": state.show_all,
            "reveal": sorted(str(token) for token in state.reveal),
            "layout": state.layout,
        },
        "filtered": context.filtered,
        "hidden_count": context.hidden_count,
        "events": items,
    }
