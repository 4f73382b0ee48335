from __future__ import annotations

from typing import TYPE_CHECKING

from covgate.output.base import plain_message

if TYPE_CHECKING:
    from covgate.model.violations import ViolationRecord
    from covgate.output.base import LogSink, ReporterOptions

IDENTITY = "lowCodeCoverage"

# '|' first so that escapes introduced below are not escaped again.
_ESCAPES = (
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
)


def escape_value(value: str) -> str:
    """Escape *value* for use inside a TeamCity service message attribute."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def build_problem(description: str, identity: str = IDENTITY) -> str:
    return f"##teamcity[buildProblem description='{escape_value(description)}' identity='{escape_value(identity)}']"


class TeamCityReporter:
    """Reports each violation as a TeamCity ``buildProblem`` service message.

    Service messages are parsed by the build agent, so colours never apply.
    """

    def __init__(self, log: LogSink, options: ReporterOptions) -> None:  # noqa: ARG002
        self._log = log

    def render(self, record: ViolationRecord) -> str:
        return build_problem(plain_message(record))

    def emit(self, record: ViolationRecord) -> None:
        self._log(self.render(record))


__all__ = ["IDENTITY", "TeamCityReporter", "build_problem", "escape_value"]
