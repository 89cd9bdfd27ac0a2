"""Helpers for reading ``key:value`` tags on events."""
from __future__ import annotations

from collections.abc import Iterable


def split_tag(tag: str) -> tuple[str, str]:
    """Split ``"key: value"`` into ``("key", "value")``; no colon yields an empty key."""
    key, sep, value = tag.partition(":")
    if not sep:
        return "", tag.strip()
    return key.strip(), value.strip()


def tag_value(tags: Iterable[str], key: str) -> str | None:
    """Return the value of the first tag with *key*, or None."""
    for tag in tags:
        tag_key, value = split_tag(tag)
        if tag_key == key:
            return value or None
    return None


def tag_values(tags: Iterable[str], key: str) -> list[str]:
    """Return every non-empty value tagged with *key*, in order."""
    values: list[str] = []
    for tag in tags:
        tag_key, value = split_tag(tag)
        if tag_key == key and value:
            values.append(value)
    return values


def tag_number(tags: Iterable[str], key: str) -> int | None:
    """Return the integer value of the first *key* tag, or None when absent or not numeric."""
    value = tag_value(tags, key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
