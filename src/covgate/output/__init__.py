"""Violation reporters for covgate."""

from __future__ import annotations

from covgate.output.base import LogSink, Reporter, ReporterOptions, format_number, plain_message
from covgate.output.registry import DEFAULT_REPORTERS, REPORTERS, build_reporters, resolve_reporter
from covgate.output.teamcity import TeamCityReporter
from covgate.output.text import TextReporter

__all__ = [
    "DEFAULT_REPORTERS",
    "REPORTERS",
    "LogSink",
    "Reporter",
    "ReporterOptions",
    "TeamCityReporter",
    "TextReporter",
    "build_reporters",
    "format_number",
    "plain_message",
    "resolve_reporter",
]
