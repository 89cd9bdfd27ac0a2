from __future__ import annotations

from datetime import datetime, timezone

from django.test import RequestFactory

from weisus.context_processors import site
from weisus.episodes import has_upcoming_episode, next_episode


def test_no_air_date_means_nothing_upcoming(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = ""

    assert next_episode() is None
    assert not has_upcoming_episode()


def test_upcoming_episode_compares_against_now(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = "2025-11-26T05:00:00Z"
    settings.NEXT_EPISODE_LABEL = "S1E5"

    episode = next_episode()

    assert episode.label == "S1E5"
    assert episode.air_date == datetime(2025, 11, 26, 5, tzinfo=timezone.utc)
    assert has_upcoming_episode(now=datetime(2025, 11, 1, tzinfo=timezone.utc))
    assert not has_upcoming_episode(now=datetime(2025, 12, 1, tzinfo=timezone.utc))


def test_naive_air_date_is_treated_as_utc(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = "2030-01-01T00:00:00"

    assert next_episode().air_date.tzinfo is not None


def test_invalid_air_date_is_ignored(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = "next tuesday"

    assert next_episode() is None


def test_context_processor_exposes_countdown(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = "2999-01-01T00:00:00Z"
    settings.NEXT_EPISODE_LABEL = "S9E1"

    context = site(RequestFactory().get("/"))

    assert context["NEXT_EPISODE"] == {"air_date": "2999-01-01T00:00:00+00:00", "label": "S9E1"}
    assert context["SITE"]["name"] == settings.SITE_NAME


def test_context_processor_hides_past_episode(settings) -> None:
    settings.NEXT_EPISODE_AIR_DATE = "2000-01-01T00:00:00Z"

    assert site(RequestFactory().get("/"))["NEXT_EPISODE"] is None
