from __future__ import annotations

from typing import Any, Callable

import pytest

from content.loader import EventCollection, build_collection
from content.validation import validate_records
from timeline.filters import FilterState
from timeline.services import build_event_context, build_timeline, is_spoiler, timeline_payload


def _collection(records: list[dict[str, Any]]) -> EventCollection:
    events, violations = validate_records(records)
    assert violations == []
    return build_collection(events)


@pytest.fixture()
def records(event_factory: Callable[..., dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        event_factory("Opening", delta="0 hours", season=1, episode=1),
        event_factory("Undated", delta=None, season=1, episode=2),
        event_factory("Two days on", delta="2 days", season=1, episode=2),
        event_factory("Finale", delta="3 weeks", season=2, episode=1),
        event_factory("Flashback", delta="-1 year", season=1, episode=3),
    ]


def _summaries(context) -> list[str]:
    return [entry["event"]["summary"] for entry in context.entries]


def test_timeline_orders_by_delta_keeping_undated_in_place(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState())

    assert _summaries(context) == ["Flashback", "Undated", "Opening", "Two days on", "Finale"]
    assert context.hidden_count == 0
    assert context.seasons == [1, 2]
    assert context.episodes_by_season == {1: [1, 2, 3], 2: [1]}


def test_timeline_describes_gaps_between_visible_entries(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState())

    diffs = [entry["time_diff"] for entry in context.entries]
    # The undated entry breaks the chain on both sides.
    assert diffs == [None, None, None, "2 days later", "2 weeks later"]


def test_spoilers_after_viewer_position_are_hidden(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState(season=1, episode=2))

    hidden = {entry["event"]["summary"] for entry in context.entries if entry["hidden"]}
    assert hidden == {"Flashback", "Finale"}
    assert context.hidden_count == 2
    for entry in context.entries:
        if entry["hidden"]:
            assert entry["time_diff"] is None
            assert "reveal=" in entry["reveal_url"]
        else:
            assert entry["reveal_url"] is None


def test_season_only_position_hides_later_seasons(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState(season=1))

    assert [entry["event"]["summary"] for entry in context.entries if entry["hidden"]] == ["Finale"]


def test_reveal_by_id_or_index(records: list[dict[str, Any]]) -> None:
    collection = _collection(records)
    finale = records[3]

    by_id = build_timeline(collection, FilterState(season=1, episode=2, reveal=frozenset({finale["id"]})))
    by_index = build_timeline(collection, FilterState(season=1, episode=2, reveal=frozenset({3})))

    for context in (by_id, by_index):
        assert [e["event"]["summary"] for e in context.entries if e["hidden"]] == ["Flashback"]


def test_show_all_disables_hiding(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState(season=1, episode=1, show_all=True))

    assert context.hidden_count == 0


def test_is_spoiler_without_episode_tags() -> None:
    event = {"id": "x", "index": 0, "season": None, "episode": None}

    assert not is_spoiler(event, FilterState(season=1, episode=1))


def test_layout_urls_preserve_filter(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState(season=1, episode=2))

    assert context.list_url == "/?season=1&episode=2"
    assert context.grid_url == "/?season=1&episode=2&layout=grid"
    assert context.show_all_url == "/?showAll=true"


def test_event_context_neighbours_and_diffs(records: list[dict[str, Any]]) -> None:
    collection = _collection(records)
    opening = records[0]

    context = build_event_context(collection, opening["id"], FilterState())

    assert context is not None
    assert context.previous["summary"] == "Undated"
    assert context.next["summary"] == "Two days on"
    assert context.since_previous is None
    assert context.until_next == "2 days later"
    assert not context.hidden


def test_event_context_hides_spoiler_neighbours(records: list[dict[str, Any]]) -> None:
    collection = _collection(records)
    two_days = records[2]

    context = build_event_context(collection, two_days["id"], FilterState(season=1, episode=2))

    assert context.next is None
    assert context.until_next is None


def test_event_context_for_hidden_event_offers_reveal(records: list[dict[str, Any]]) -> None:
    collection = _collection(records)
    finale = records[3]

    context = build_event_context(collection, finale["id"], FilterState(season=1))

    assert context.hidden
    assert context.reveal_url.endswith(f"reveal={finale['id']}")
    assert context.since_previous is None


def test_event_context_unknown_id(records: list[dict[str, Any]]) -> None:
    assert build_event_context(_collection(records), "missing", FilterState()) is None


def test_timeline_payload_redacts_hidden_events(records: list[dict[str, Any]]) -> None:
    context = build_timeline(_collection(records), FilterState(season=1, episode=2), filtered=True)

    payload = timeline_payload(context)

    assert payload["filtered"] is True
    assert payload["hidden_count"] == 2
    assert payload["filter"]["season"] == 1
    hidden = [item for item in payload["events"] if item["hidden"]]
    assert all(set(item) == {"id", "hidden"} for item in hidden)
    visible = [item for item in payload["events"] if not item["hidden"]]
    assert {item["summary"] for item in visible} == {"Undated", "Opening", "Two days on"}


def test_event_context_skips_to_nearest_visible_neighbour(
    records: list[dict[str, Any]], event_factory: Callable[..., dict[str, Any]]
) -> None:
    records.append(event_factory("Epilogue", delta="4 weeks"))
    collection = _collection(records)
    opening = records[0]

    context = build_event_context(collection, opening["id"], FilterState(season=1, episode=1))

    assert context.previous is None
    assert context.next["summary"] == "Epilogue"
    assert context.until_next == "4 weeks later"


def test_concealing_state_hides_every_tagged_event(
    records: list[dict[str, Any]], event_factory: Callable[..., dict[str, Any]]
) -> None:
    records.append(event_factory("Epilogue", delta="4 weeks"))
    collection = _collection(records)
    opening = records[0]

    context = build_timeline(collection, FilterState(season=1, reveal=frozenset({opening["id"]}), conceal=True))

    visible = [entry["event"]["summary"] for entry in context.entries if not entry["hidden"]]
    assert visible == ["Opening", "Epilogue"]
    assert context.hidden_count == 4
