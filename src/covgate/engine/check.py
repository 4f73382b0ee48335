"""Threshold checking across the global and per-file scopes."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from covgate._meta import logger
from covgate.engine.summarize import summarize_files, summarize_global
from covgate.model.path_filter import display_path, exclude_files
from covgate.model.thresholds import evaluate_rule
from covgate.model.types import GLOBAL_LABEL, Scope
from covgate.model.violations import EvaluationResult, ViolationRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from covgate.engine.summarize import Summarizer
    from covgate.model.metrics import CoverageTotals
    from covgate.model.thresholds import ThresholdConfig, ThresholdRule
    from covgate.output.base import Reporter

RawT = TypeVar("RawT")


def _violations(
    scope: Scope,
    rule: ThresholdRule,
    totals: CoverageTotals,
    *,
    filename: str | None,
    display_name: str,
) -> list[ViolationRecord]:
    out: list[ViolationRecord] = []
    for metric, result in evaluate_rule(rule, totals):
        expected = rule.resolve(metric)
        # failed checks always carry a value and a non-zero threshold
        if not result.failed or result.value is None or expected is None:
            continue
        out.append(
            ViolationRecord(
                scope=scope,
                metric=metric,
                filename=filename,
                actual_value=result.value,
                expected_threshold=expected,
                display_name=display_name,
            )
        )
    return out


def check(
    thresholds: ThresholdConfig,
    dataset: Mapping[str, RawT],
    *,
    summarizer: Summarizer[RawT],
    excludes: Sequence[str] = (),
    base_path: str = "",
    reporters: Iterable[Reporter] = (),
) -> EvaluationResult:
    """Evaluate *thresholds* against *dataset* and hand every violation to *reporters*.

    Steps
    -----
    1. Drop files matching *excludes* (a new mapping; *dataset* is untouched).
    2. Global rule against the merged summary of the remaining files.
    3. Per-file rule against every remaining file, in dataset order.

    Global violations come first; within a scope, metrics follow
    ``METRIC_ORDER``. Data errors raised by *summarizer* propagate.
    """
    filtered = exclude_files(dataset, excludes, base_path)
    logger.debug("checking %d of %d files", len(filtered), len(dataset))

    violations: list[ViolationRecord] = []

    global_rule = thresholds.rule_for(Scope.GLOBAL)
    if global_rule is not None:
        totals = summarize_global(filtered, summarizer)
        violations.extend(
            _violations(
                Scope.GLOBAL,
                global_rule,
                totals,
                filename=None,
                display_name=GLOBAL_LABEL,
            )
        )

    each_rule = thresholds.rule_for(Scope.EACH)
    if each_rule is not None:
        for filename, totals in summarize_files(filtered, summarizer):
            violations.extend(
                _violations(
                    Scope.EACH,
                    each_rule,
                    totals,
                    filename=filename,
                    display_name=display_path(filename, base_path),
                )
            )

    result = EvaluationResult(violations=tuple(violations))
    logger.debug("%d threshold violation(s)", len(result.violations))

    sinks = tuple(reporters)
    for record in result.violations:
        for sink in sinks:
            sink.emit(record)
    return result


__all__ = ["check"]
