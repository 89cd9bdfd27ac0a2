"""Season/episode catalog derived from the event collection."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from content.utils import tag_number


@dataclass(slots=True, frozen=True)
class SeasonCatalog:
    """Read-only mapping of season number to its known episode numbers."""

    episodes_by_season: Mapping[int, tuple[int, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        normalized = {
            int(season): tuple(sorted({int(ep) for ep in episodes}))
            for season, episodes in self.episodes_by_season.items()
        }
        object.__setattr__(self, "episodes_by_season", MappingProxyType(dict(sorted(normalized.items()))))

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, Iterable[int]]) -> SeasonCatalog:
        return cls({season: tuple(episodes) for season, episodes in mapping.items()})

    @classmethod
    def from_events(cls, events: Iterable[Mapping[str, Any]]) -> SeasonCatalog:
        """Build the catalog from events carrying both ``season:`` and ``episode:`` tags."""
        collected: dict[int, set[int]] = defaultdict(set)
        for event in events:
            tags = event.get("tags") or []
            season = tag_number(tags, "season")
            episode = tag_number(tags, "episode")
            if season is not None and episode is not None:
                collected[season].add(episode)
        return cls.from_mapping(collected)

    @property
    def seasons(self) -> tuple[int, ...]:
        return tuple(self.episodes_by_season)

    @property
    def all_episodes(self) -> tuple[int, ...]:
        merged: set[int] = set()
        for episodes in self.episodes_by_season.values():
            merged.update(episodes)
        return tuple(sorted(merged))

    def episodes_for(self, season: int) -> tuple[int, ...]:
        return self.episodes_by_season.get(season, ())

    def is_valid_episode_for_season(self, season: int, episode: int) -> bool:
        return episode in self.episodes_for(season)

    def max_episode_for_season(self, season: int) -> int | None:
        episodes = self.episodes_for(season)
        return episodes[-1] if episodes else None
