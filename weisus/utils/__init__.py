"""Shared utility helpers for the weisus project."""

from .files import cache_token, read_json

__all__ = [
    "cache_token",
    "read_json",
]
