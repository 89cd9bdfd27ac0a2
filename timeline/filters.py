"""Spoiler filter query parameters: parsing and validation.

The viewer's filter state travels in flat query parameters (``season``,
``episode``, ``showAll``, ``reveal``, ``layout``). They are validated against
a :class:`~timeline.catalog.SeasonCatalog` supplied by the caller, so the same
rules apply to any catalog a test or view hands in.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlencode

from django import forms
from django.core.exceptions import ValidationError

from .catalog import SeasonCatalog

logger = logging.getLogger(__name__)

FILTER_KEYS = ("season", "episode", "showAll", "reveal", "layout")

LAYOUT_LIST = "list"
LAYOUT_GRID = "grid"
LAYOUTS = (LAYOUT_LIST, LAYOUT_GRID)

REVEAL_INDEX_RE = re.compile(r"^\d+\Z")
REVEAL_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*\Z")

RevealToken = int | str


@dataclass(slots=True, frozen=True)
class FilterState:
    """Validated timeline display preferences."""

    season: int | None = None
    episode: int | None = None
    show_all: bool = False
    reveal: frozenset[RevealToken] = field(default_factory=frozenset)
    layout: str = LAYOUT_LIST
    # Hide every tagged event; set when the requested position was rejected.
    conceal: bool = False

    def is_revealed(self, event_id: str, index: int) -> bool:
        return event_id in self.reveal or index in self.reveal

    def with_revealed(self, token: RevealToken) -> FilterState:
        return replace(self, reveal=self.reveal | {token})

    def with_layout(self, layout: str) -> FilterState:
        return replace(self, layout=layout)

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.season is not None:
            params["season"] = str(self.season)
        if self.episode is not None:
            params["episode"] = str(self.episode)
        if self.show_all:
            params["showAll"] = "true"
        if self.reveal:
            # ints first, then identifiers, so the query string is stable
            ordered = sorted(
                self.reveal,
                key=lambda token: (isinstance(token, str), token if isinstance(token, int) else 0, str(token)),
            )
            params["reveal"] = ",".join(str(token) for token in ordered)
        if self.layout != LAYOUT_LIST:
            params["layout"] = self.layout
        return params

    def to_query(self) -> str:
        return urlencode(self.to_params())


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str
    allowed: tuple[Any, ...] = ()


@dataclass(slots=True, frozen=True)
class FilterResult:
    """Outcome of validating filter parameters: a state or a list of field errors.

    When validation fails, ``fallback`` carries the fields that did validate
    with ``conceal`` set, so pages can still render without exposing spoilers.
    """

    state: FilterState | None
    errors: tuple[FieldError, ...] = ()
    fallback: FilterState | None = None

    @property
    def ok(self) -> bool:
        return self.state is not None and not self.errors

    def errors_by_field(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


class FilterParamsError(Exception):
    """Raised when filter parameters fail validation."""

    def __init__(self, errors: tuple[FieldError, ...]) -> None:
        self.errors = errors
        fields = ", ".join(sorted({error.field for error in errors}))
        super().__init__(f"Invalid filter parameters: {fields}")


def parse_reveal(value: str | None) -> frozenset[RevealToken]:
    """Split a comma separated reveal list into indices and identifiers.

    Tokens that are neither a non-negative integer nor an identifier are
    dropped.
    """
    if not value:
        return frozenset()

    tokens: set[RevealToken] = set()
    for raw in value.split(","):
        token = raw.strip()
        if REVEAL_INDEX_RE.match(token):
            tokens.add(int(token))
        elif REVEAL_IDENTIFIER_RE.match(token):
            tokens.add(token)
        elif token:
            logger.debug("Dropping unparseable reveal token %r", token)
    return frozenset(tokens)


def _allowed_error(message: str, allowed: tuple[int, ...] | tuple[str, ...]) -> ValidationError:
    return ValidationError(
        message,
        code="not_allowed",
        params={"allowed": allowed, "allowed_display": ", ".join(str(a) for a in allowed) or "none"},
    )


class FilterParamsForm(forms.Form):
    season = forms.IntegerField(required=False, min_value=1)
    episode = forms.IntegerField(required=False, min_value=1)
    showAll = forms.CharField(required=False, strip=False)
    reveal = forms.CharField(required=False, strip=False)
    layout = forms.CharField(required=False)

    def __init__(self, *args: Any, catalog: SeasonCatalog, **kwargs: Any) -> None:
        self.catalog = catalog
        super().__init__(*args, **kwargs)

    def clean_season(self) -> int | None:
        season = self.cleaned_data.get("season")
        if season is None:
            return None
        if season not in self.catalog.seasons:
            raise _allowed_error("Season must be one of: %(allowed_display)s", self.catalog.seasons)
        return season

    def clean_episode(self) -> int | None:
        episode = self.cleaned_data.get("episode")
        if episode is None:
            return None
        if episode not in self.catalog.all_episodes:
            raise _allowed_error("Episode must be one of: %(allowed_display)s", self.catalog.all_episodes)
        return episode

    def clean_showAll(self) -> bool:
        return self.cleaned_data.get("showAll") == "true"

    def clean_reveal(self) -> frozenset[RevealToken]:
        return parse_reveal(self.cleaned_data.get("reveal"))

    def clean_layout(self) -> str:
        layout = self.cleaned_data.get("layout") or LAYOUT_LIST
        if layout not in LAYOUTS:
            raise _allowed_error("Layout must be one of: %(allowed_display)s", LAYOUTS)
        return layout

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        season = cleaned.get("season")
        episode = cleaned.get("episode")
        if season is not None and episode is not None:
            if not self.catalog.is_valid_episode_for_season(season, episode):
                episodes = self.catalog.episodes_for(season)
                self.add_error(
                    "episode",
                    _allowed_error(f"Episode {episode} is not part of season {season}; expected one of: %(allowed_display)s", episodes),
                )
        return cleaned


def _raw_data(raw: Mapping[str, Any]) -> dict[str, str]:
    data: dict[str, str] = {}
    for key in FILTER_KEYS:
        value = raw.get(key)
        if value is not None:
            data[key] = str(value)
    return data


def validate_filter_params(raw: Mapping[str, Any], catalog: SeasonCatalog) -> FilterResult:
    """Validate raw query parameters against *catalog* without raising."""
    form = FilterParamsForm(data=_raw_data(raw), catalog=catalog)
    if not form.is_valid():
        errors: list[FieldError] = []
        for field_name, field_errors in form.errors.as_data().items():
            for error in field_errors:
                params = error.params or {}
                message = error.message % params if params else error.message
                errors.append(FieldError(field_name, str(message), tuple(params.get("allowed", ()))))
        valid = form.cleaned_data
        fallback = FilterState(
            season=valid.get("season"),
            reveal=valid.get("reveal", frozenset()),
            layout=valid.get("layout", LAYOUT_LIST),
            conceal=True,
        )
        return FilterResult(state=None, errors=tuple(errors), fallback=fallback)

    data = form.cleaned_data
    state = FilterState(
        season=data["season"],
        episode=data["episode"],
        show_all=data["showAll"],
        reveal=data["reveal"],
        layout=data["layout"],
    )
    return FilterResult(state=state)


def parse_filter_params(raw: Mapping[str, Any], catalog: SeasonCatalog) -> FilterState:
    """Validate raw query parameters, raising :class:`FilterParamsError` when invalid."""
    result = validate_filter_params(raw, catalog)
    if not result.ok:
        raise FilterParamsError(result.errors)
    return result.state


def has_filter_params(raw: Mapping[str, Any]) -> bool:
    """True when the viewer explicitly set a position or asked to see everything."""
    return "season" in raw or "showAll" in raw
