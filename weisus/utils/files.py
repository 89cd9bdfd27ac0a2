from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

__all__ = ["cache_token", "read_json"]


def read_json(path: Path) -> Any:
    """Read and decode a UTF-8 JSON file, logging the failure before re-raising."""

    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        message = f"Unable to read {target}: {exc}"
        logger.error(message)
        raise OSError(message) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", target, exc)
        raise

    logger.debug("Read JSON file: %s", target)
    return data


def cache_token(path: Path) -> str:
    """Return a stable cache token derived from file metadata."""

    target = Path(path)
    try:
        stat = target.stat()
    except OSError as exc:
        logger.debug("Falling back to timestamp cache token for %s: %s", target, exc)
        return f"{int(time.time() * 1_000_000):x}"

    inode = getattr(stat, "st_ino", 0)
    token = f"{stat.st_mtime_ns:x}-{stat.st_size:x}-{inode:x}"
    logger.debug("cache_token generated for %s: %s", target, token)
    return token
