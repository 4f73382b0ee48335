from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from covgate.errors import ConfigError
from covgate.model.types import FULL_COVERAGE, METRIC_ORDER, MetricKind, Scope

if TYPE_CHECKING:
    from covgate.model.metrics import CoverageSummary, CoverageTotals

_THRESHOLD_PATTERN = re.compile(r"^[a-zA-Z_-]+=")

_METRIC_ALIASES: dict[str, MetricKind] = {
    "stmt": MetricKind.STATEMENTS,
    "statement": MetricKind.STATEMENTS,
    "statements": MetricKind.STATEMENTS,
    "br": MetricKind.BRANCHES,
    "branch": MetricKind.BRANCHES,
    "branches": MetricKind.BRANCHES,
    "line": MetricKind.LINES,
    "lines": MetricKind.LINES,
    "fn": MetricKind.FUNCTIONS,
    "func": MetricKind.FUNCTIONS,
    "function": MetricKind.FUNCTIONS,
    "functions": MetricKind.FUNCTIONS,
}


@dataclass(frozen=True, slots=True)
class UniformThreshold:
    """A single threshold value applied to every metric."""

    value: float

    def resolve(self, metric: MetricKind) -> float | None:  # noqa: ARG002
        return self.value


@dataclass(frozen=True, slots=True)
class PerMetricThreshold:
    """Individual threshold values keyed by metric; missing metrics are unconstrained."""

    values: Mapping[MetricKind, float] = field(default_factory=dict)

    def resolve(self, metric: MetricKind) -> float | None:
        return self.values.get(metric)


ThresholdRule = UniformThreshold | PerMetricThreshold

# Every metric at 0: the scope is summarized but can never fail.
NO_CONSTRAINT: ThresholdRule = UniformThreshold(0.0)


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Threshold rules for the whole project and for every individual file.

    Fields
    ------
    global_rule:
        Rule checked against the merged summary of all remaining files.
    each_rule:
        Rule checked against every remaining file on its own.

    ``None`` disables a scope altogether.
    """

    global_rule: ThresholdRule | None = NO_CONSTRAINT
    each_rule: ThresholdRule | None = NO_CONSTRAINT

    def rule_for(self, scope: Scope) -> ThresholdRule | None:
        return self.global_rule if scope is Scope.GLOBAL else self.each_rule


@dataclass(frozen=True, slots=True)
class ThresholdCheck:
    """Outcome of checking one threshold against one summary."""

    skipped: bool
    failed: bool
    value: float | int | None = None


def evaluate_threshold(threshold: float | None, summary: CoverageSummary) -> ThresholdCheck:
    """Check *summary* against a signed *threshold*.

    Positive thresholds are minimum percentages, negative thresholds are the
    largest allowed gap (``covered - total``). A missing threshold and a
    threshold of exactly ``0`` both mean "no constraint" and are skipped.
    """
    if not threshold:
        return ThresholdCheck(skipped=True, failed=False)

    if threshold > 0:
        value: float | int = summary.pct
    else:
        value = summary.gap
    return ThresholdCheck(skipped=False, failed=value < threshold, value=value)


def evaluate_rule(rule: ThresholdRule, totals: CoverageTotals) -> list[tuple[MetricKind, ThresholdCheck]]:
    """Evaluate *rule* for every metric kind, in reporting order."""
    return [(metric, evaluate_threshold(rule.resolve(metric), totals[metric])) for metric in METRIC_ORDER]


def parse_metric(name: str) -> MetricKind:
    key = name.strip().lower()
    try:
        return _METRIC_ALIASES[key]
    except KeyError:
        msg = f"unknown threshold metric: {name!r}"
        raise ConfigError(msg) from None


def parse_threshold_rule(raw: object) -> ThresholdRule:
    """Build a rule from a configuration value: a number or a metric mapping."""
    if isinstance(raw, Mapping):
        values: dict[MetricKind, float] = {}
        for key, value in raw.items():
            metric = parse_metric(str(key))
            if metric in values:
                msg = f"duplicate threshold for metric {metric.value!r}"
                raise ConfigError(msg)
            values[metric] = _coerce_value(value, context=str(key))
        return PerMetricThreshold(values)
    return UniformThreshold(_coerce_value(raw, context="threshold"))


def parse_threshold_expression(expression: str) -> ThresholdRule:
    """Parse a threshold expression like '80' or 'statements=90,branches=-5'."""
    if not expression or not expression.strip():
        msg = "threshold expression must be non-empty"
        raise ConfigError(msg)

    text = expression.strip()
    if "=" not in text:
        return UniformThreshold(_parse_number(text, token=text))

    values: dict[MetricKind, float] = {}
    tokens = [token.strip() for token in re.split(r"[,\s]+", text) if token.strip()]
    for token in tokens:
        if "=" not in token or not _THRESHOLD_PATTERN.match(token):
            msg = f"invalid threshold token: {token!r}"
            raise ConfigError(msg)
        key, raw_value = token.split("=", 1)
        metric = parse_metric(key)
        if metric in values:
            msg = f"duplicate threshold constraint in {token!r}"
            raise ConfigError(msg)
        values[metric] = _parse_number(raw_value, token=token)
    return PerMetricThreshold(values)


def _parse_number(value: str, *, token: str) -> float:
    try:
        number = float(value.strip().rstrip("%"))
    except ValueError as exc:
        msg = f"invalid threshold value in {token!r}: {value!r}"
        raise ConfigError(msg) from exc
    return _check_range(number, context=token)


def _coerce_value(value: object, *, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"threshold for {context!r} must be a number, got {value!r}"
        raise ConfigError(msg)
    return _check_range(float(value), context=context)


def _check_range(number: float, *, context: str) -> float:
    if not math.isfinite(number):
        msg = f"threshold in {context!r} must be finite, got {number}"
        raise ConfigError(msg)
    if number > float(FULL_COVERAGE):
        msg = f"percentage out of range in {context!r}: {number}"
        raise ConfigError(msg)
    return number


__all__ = [
    "NO_CONSTRAINT",
    "PerMetricThreshold",
    "ThresholdCheck",
    "ThresholdConfig",
    "ThresholdRule",
    "UniformThreshold",
    "evaluate_rule",
    "evaluate_threshold",
    "parse_metric",
    "parse_threshold_expression",
    "parse_threshold_rule",
]
