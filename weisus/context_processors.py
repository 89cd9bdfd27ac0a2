from __future__ import annotations

from django.conf import settings

from .episodes import has_upcoming_episode, next_episode


def site(request):
    """Expose site settings and the next-episode countdown in templates."""

    upcoming = None
    if has_upcoming_episode():
        episode = next_episode()
        upcoming = {
            "air_date": episode.air_date.isoformat(),
            "label": episode.label,
        }

    return {
        "SITE": {
            "name": settings.SITE_NAME,
            "tagline": settings.SITE_TAGLINE,
        },
        "NEXT_EPISODE": upcoming,
    }
