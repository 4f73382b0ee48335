"""Reporter registry for covgate output sinks."""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.errors import ConfigError
from covgate.output.teamcity import TeamCityReporter
from covgate.output.text import TextReporter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covgate.output.base import LogSink, Reporter, ReporterFactory, ReporterOptions

REPORTERS: dict[str, ReporterFactory] = {
    "text": TextReporter,
    "teamcity": TeamCityReporter,
}

DEFAULT_REPORTERS: tuple[str, ...] = ("text",)


def resolve_reporter(name: str) -> ReporterFactory:
    """Resolve *name* to a reporter factory."""
    key = name.strip().lower()
    try:
        return REPORTERS[key]
    except KeyError as err:
        choices = list(REPORTERS)
        suggestion = difflib.get_close_matches(key, choices, n=1)
        hint = f". Did you mean {suggestion[0]!r}?" if suggestion else ""
        msg = f"{name!r} is not one of {', '.join(choices)}{hint}"
        raise ConfigError(msg) from err


def build_reporters(names: Sequence[str], log: LogSink, options: ReporterOptions) -> list[Reporter]:
    """Instantiate each named reporter once, in the order given."""
    reporters: list[Reporter] = []
    seen: set[str] = set()
    for name in names:
        factory = resolve_reporter(name)
        key = name.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        logger.debug("selected reporter %s (color=%s)", key, options.color)
        reporters.append(factory(log, options))
    return reporters


__all__ = ["DEFAULT_REPORTERS", "REPORTERS", "build_reporters", "resolve_reporter"]
