"""Base types and interface for violation reporters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from covgate.model.violations import ViolationRecord

LogSink = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class ReporterOptions:
    """Container for options shared by all reporters."""

    color: bool = True


class Reporter(Protocol):
    def emit(self, record: ViolationRecord) -> None: ...


class ReporterFactory(Protocol):
    def __call__(self, log: LogSink, options: ReporterOptions) -> Reporter: ...


def format_number(value: float) -> str:
    """Render *value* without a trailing ``.0`` for integral numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def plain_message(record: ViolationRecord) -> str:
    """Return the uncoloured ``Low Coverage`` line for *record*."""
    return (
        f"Low Coverage: {record.display_name} "
        f"{format_number(record.actual_value)}% of "
        f"{format_number(record.expected_threshold)}% {record.metric.value}"
    )


__all__ = [
    "LogSink",
    "Reporter",
    "ReporterFactory",
    "ReporterOptions",
    "format_number",
    "plain_message",
]
