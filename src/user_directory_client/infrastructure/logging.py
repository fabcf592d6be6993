"""Logging setup for the interactive console client."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str) -> int:
    """Map a level name to its numeric value, falling back to INFO."""

    normalized_level = level.strip().upper() if level.strip() else "INFO"
    resolved = logging.getLevelName(normalized_level)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str, log_file: str | None = None) -> int:
    """Configure process logging and return the numeric level in effect.

    The console owns stdout for rendered views, so records go to stderr unless
    ``log_file`` redirects them to a file.
    """

    resolved_level = resolve_log_level(level)
    if log_file:
        logging.basicConfig(level=resolved_level, format=_LOG_FORMAT, filename=log_file)
    else:
        logging.basicConfig(level=resolved_level, format=_LOG_FORMAT)
    return resolved_level
