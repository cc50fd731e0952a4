"""Process-wide logging setup for the API, the UI and scripts."""

from __future__ import annotations

import logging

from meeting_summary.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = settings.log_level
    if isinstance(level, int):
        return level
    level = level.strip()
    if level.isdigit():
        return int(level)
    resolved = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | int | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    resolved = _resolve_level(level)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved)
    # SDK request logs are noisy at INFO
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
