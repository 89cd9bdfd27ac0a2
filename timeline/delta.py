"""Relative-time ("delta") parsing, comparison and ordering."""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

__all__ = ["UNIT_HOURS", "diff_description", "parse_delta", "sort_by_delta", "unit_hours"]

T = TypeVar("T")

# Fixed approximations: a month is 30 days, a year is 365 days.
UNIT_HOURS: dict[str, int] = {
    "hour": 1,
    "day": 24,
    "week": 24 * 7,
    "month": 24 * 30,
    "year": 24 * 365,
}

DELTA_TERM_RE = re.compile(r"([+-]?\d+)\s+(hours?|days?|weeks?|months?|years?)\b", re.IGNORECASE)

# Ascending (upper bound in hours, unit) pairs used when describing a difference.
_DESCRIBE_STEPS: tuple[tuple[int, str], ...] = (
    (UNIT_HOURS["day"], "hour"),
    (UNIT_HOURS["week"], "day"),
    (UNIT_HOURS["month"], "week"),
    (UNIT_HOURS["year"], "month"),
)


def unit_hours(unit: str) -> int:
    """Return the hour equivalent of a unit word such as ``"Days"`` or ``"week"``."""
    normalized = unit.strip().lower()
    if normalized.endswith("s"):
        normalized = normalized[:-1]
    try:
        return UNIT_HOURS[normalized]
    except KeyError:
        raise ValueError(f"Unknown delta unit: {unit!r}") from None


def parse_delta(expr: str | None) -> int | None:
    """Parse a delta expression like ``"2 weeks 3 days"`` into total hours.

    Every ``<signed integer> <unit>`` term found in the string is summed.
    Returns ``None`` for a missing expression, and also (after logging a
    warning) when no term can be found.
    """
    if expr is None:
        return None

    terms = DELTA_TERM_RE.findall(expr)
    if not terms:
        logger.warning("Unable to parse delta: %r", expr)
        return None

    return sum(int(value) * unit_hours(unit) for value, unit in terms)


def _pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def diff_description(from_expr: str | None, to_expr: str | None) -> str | None:
    """Describe how far *to_expr* lies from *from_expr*, e.g. ``"3 days later"``.

    The largest unit that keeps the magnitude at one or more is used and the
    value is floored. ``None`` when either side cannot be parsed.
    """
    from_hours = parse_delta(from_expr)
    to_hours = parse_delta(to_expr)
    if from_hours is None or to_hours is None:
        return None

    diff = to_hours - from_hours
    if diff == 0:
        return "same time"

    magnitude = abs(diff)
    direction = "later" if diff > 0 else "earlier"

    unit = "year"
    for upper_bound, step_unit in _DESCRIBE_STEPS:
        if magnitude < upper_bound:
            unit = step_unit
            break

    count = magnitude // UNIT_HOURS[unit]
    return f"{_pluralize(count, unit)} {direction}"


def _default_delta(item: Any) -> str | None:
    if isinstance(item, Mapping):
        return item.get("delta")
    return getattr(item, "delta", None)


def sort_by_delta(items: Iterable[T], key: Callable[[T], str | None] | None = None) -> list[T]:
    """Order items chronologically by their delta without guessing unknown times.

    Items whose delta is missing or unparseable keep their exact position.
    The remaining items are sorted by canonical duration into the slots they
    already occupy; equal durations keep their original order.
    """
    get_delta = key or _default_delta
    ordered = list(items)

    slots: list[int] = []
    timed: list[tuple[int, int, T]] = []
    for index, item in enumerate(ordered):
        hours = parse_delta(get_delta(item))
        if hours is None:
            continue
        slots.append(index)
        timed.append((hours, index, item))

    timed.sort(key=lambda entry: (entry[0], entry[1]))
    for slot, (_, _, item) in zip(slots, timed):
        ordered[slot] = item

    return ordered
