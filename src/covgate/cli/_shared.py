from __future__ import annotations

import logging

from covgate.config import LOG_FORMAT


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the configured default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed


def configure_logging(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("covgate").setLevel(level)
