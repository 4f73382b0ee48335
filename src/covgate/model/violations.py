from __future__ import annotations

from dataclasses import dataclass

from covgate.model.types import MetricKind, Scope


@dataclass(frozen=True, slots=True)
class ViolationRecord:
    """One failing (scope, metric, file) combination.

    Fields
    ------
    scope:
        ``global`` for the project-wide summary, ``each`` for a single file.
    metric:
        The metric that fell short.
    filename:
        Dataset key of the offending file; ``None`` for the global scope.
    actual_value:
        Percentage for positive thresholds, gap (``covered - total``) for
        negative ones.
    expected_threshold:
        The threshold the value was compared with.
    display_name:
        Base-relative filename, or the ``GLOBAL`` label.
    """

    scope: Scope
    metric: MetricKind
    filename: str | None
    actual_value: float | int
    expected_threshold: float
    display_name: str


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Ordered violations of one check run."""

    violations: tuple[ViolationRecord, ...] = ()

    @property
    def failed(self) -> bool:
        return bool(self.violations)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


__all__ = ["EvaluationResult", "ViolationRecord"]
