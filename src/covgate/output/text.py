from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from covgate.output.base import format_number, plain_message

if TYPE_CHECKING:
    from covgate.model.violations import ViolationRecord
    from covgate.output.base import LogSink, ReporterOptions


def styled_message(record: ViolationRecord) -> Text:
    """Return the ``Low Coverage`` line with terminal styling applied."""
    head, sep, basename = record.display_name.rpartition("/")
    text = Text()
    text.append("Low Coverage: ", style="bold red")
    text.append(head + sep)
    text.append(basename, style="yellow")
    text.append(" ")
    text.append(f"{format_number(record.actual_value)}%", style="bold")
    text.append(" of ")
    text.append(f"{format_number(record.expected_threshold)}% ", style="bold")
    text.append(record.metric.value, style="bold")
    return text


def _to_ansi(text: Text) -> str:
    console = Console(force_terminal=True, color_system="standard", soft_wrap=True, highlight=False)
    with console.capture() as cap:
        console.print(text, end="")
    return cap.get()


class TextReporter:
    """Writes one human-readable line per violation."""

    def __init__(self, log: LogSink, options: ReporterOptions) -> None:
        self._log = log
        self._color = options.color

    def render(self, record: ViolationRecord) -> str:
        if self._color:
            return _to_ansi(styled_message(record))
        return plain_message(record)

    def emit(self, record: ViolationRecord) -> None:
        self._log(self.render(record))


__all__ = ["TextReporter", "styled_message"]
