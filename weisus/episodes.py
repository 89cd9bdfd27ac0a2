"""Countdown helpers for the next scheduled episode."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NextEpisode:
    air_date: datetime
    label: str


def next_episode() -> NextEpisode | None:
    """Return the configured next episode, or None when nothing is scheduled."""
    raw = getattr(settings, "NEXT_EPISODE_AIR_DATE", "") or ""
    if not raw:
        return None

    try:
        air_date = parse_datetime(raw)
    except ValueError:
        air_date = None
    if air_date is None:
        logger.warning("Ignoring invalid NEXT_EPISODE_AIR_DATE: %r", raw)
        return None
    if timezone.is_naive(air_date):
        air_date = timezone.make_aware(air_date, dt_timezone.utc)

    return NextEpisode(air_date=air_date, label=getattr(settings, "NEXT_EPISODE_LABEL", "") or "")


def has_upcoming_episode(now: datetime | None = None) -> bool:
    episode = next_episode()
    if episode is None:
        return False
    return episode.air_date > (now or timezone.now())
