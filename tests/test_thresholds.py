import pytest

from covgate.errors import ConfigError
from covgate.model.metrics import CoverageSummary, CoverageTotals
from covgate.model.thresholds import (
    NO_CONSTRAINT,
    PerMetricThreshold,
    ThresholdCheck,
    ThresholdConfig,
    UniformThreshold,
    evaluate_rule,
    evaluate_threshold,
    parse_threshold_expression,
    parse_threshold_rule,
)
from covgate.model.types import MetricKind, Scope


@pytest.mark.parametrize("threshold", [None, 0, 0.0])
def test_missing_or_zero_threshold_is_skipped(threshold: float | None) -> None:
    result = evaluate_threshold(threshold, CoverageSummary(covered=0, total=10))
    assert result == ThresholdCheck(skipped=True, failed=False, value=None)


@pytest.mark.parametrize(
    ("threshold", "covered", "total", "failed"),
    [
        (80, 3, 4, True),
        (75, 3, 4, False),
        (74.99, 3, 4, False),
        (100, 10, 10, False),
        (100, 0, 0, False),
        (1, 0, 5, True),
    ],
)
def test_positive_threshold_compares_percentage(threshold: float, covered: int, total: int, failed: bool) -> None:
    summary = CoverageSummary(covered=covered, total=total)
    result = evaluate_threshold(threshold, summary)
    assert result.skipped is False
    assert result.value == summary.pct
    assert result.failed is failed


@pytest.mark.parametrize(
    ("threshold", "covered", "total", "failed"),
    [
        (-5, 10, 20, True),
        (-10, 10, 20, False),
        (-11, 10, 20, False),
        (-1, 4, 4, False),
        (-1, 0, 0, False),
        (-1, 2, 4, True),
    ],
)
def test_negative_threshold_compares_gap(threshold: float, covered: int, total: int, failed: bool) -> None:
    result = evaluate_threshold(threshold, CoverageSummary(covered=covered, total=total))
    assert result.value == covered - total
    assert result.failed is failed


def test_uniform_threshold_resolves_every_metric() -> None:
    rule = UniformThreshold(50.0)
    assert [rule.resolve(m) for m in MetricKind] == [50.0] * 4


def test_per_metric_threshold_leaves_missing_metrics_unconstrained() -> None:
    rule = PerMetricThreshold({MetricKind.BRANCHES: -5.0})
    assert rule.resolve(MetricKind.BRANCHES) == -5.0
    assert rule.resolve(MetricKind.STATEMENTS) is None


def test_evaluate_rule_walks_metrics_in_fixed_order() -> None:
    totals = CoverageTotals(
        statements=CoverageSummary(1, 2),
        branches=CoverageSummary(1, 2),
        lines=CoverageSummary(2, 2),
        functions=CoverageSummary(0, 2),
    )
    checks = evaluate_rule(UniformThreshold(60.0), totals)
    assert [m for m, _ in checks] == [
        MetricKind.STATEMENTS,
        MetricKind.BRANCHES,
        MetricKind.LINES,
        MetricKind.FUNCTIONS,
    ]
    assert [c.failed for _, c in checks] == [True, True, False, True]


def test_threshold_config_defaults_to_non_failing_rules() -> None:
    config = ThresholdConfig()
    assert config.rule_for(Scope.GLOBAL) == NO_CONSTRAINT
    assert config.rule_for(Scope.EACH) == NO_CONSTRAINT


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (80, UniformThreshold(80.0)),
        (-3, UniformThreshold(-3.0)),
        (
            {"statements": 90, "br": -5},
            PerMetricThreshold({MetricKind.STATEMENTS: 90.0, MetricKind.BRANCHES: -5.0}),
        ),
        ({"Functions": 50.5}, PerMetricThreshold({MetricKind.FUNCTIONS: 50.5})),
    ],
)
def test_parse_threshold_rule(raw: object, expected: object) -> None:
    assert parse_threshold_rule(raw) == expected


@pytest.mark.parametrize(
    ("raw", "pattern"),
    [
        (True, "must be a number"),
        ("80", "must be a number"),
        ({"lines": None}, "must be a number"),
        ({"coverage": 10}, "unknown threshold metric"),
        ({"stmt": 10, "statements": 20}, "duplicate threshold"),
        (101, "out of range"),
        (float("nan"), "must be finite"),
        ({"branches": float("inf")}, "must be finite"),
    ],
)
def test_parse_threshold_rule_rejects_invalid_input(raw: object, pattern: str) -> None:
    with pytest.raises(ConfigError, match=pattern):
        parse_threshold_rule(raw)


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("80", UniformThreshold(80.0)),
        ("80%", UniformThreshold(80.0)),
        ("-10", UniformThreshold(-10.0)),
        (
            "statements=90, branches=-5",
            PerMetricThreshold({MetricKind.STATEMENTS: 90.0, MetricKind.BRANCHES: -5.0}),
        ),
        ("LINES=75% fn=60", PerMetricThreshold({MetricKind.LINES: 75.0, MetricKind.FUNCTIONS: 60.0})),
    ],
)
def test_parse_threshold_expression(expression: str, expected: object) -> None:
    assert parse_threshold_expression(expression) == expected


@pytest.mark.parametrize(
    ("expression", "pattern"),
    [
        ("", "non-empty"),
        (" ", "non-empty"),
        ("high", "invalid threshold value"),
        ("stmt=80 lines", "invalid threshold token"),
        ("foo=10", "unknown threshold metric"),
        ("stmt=80 stmt=90", "duplicate threshold constraint"),
        ("stmt=abc", "invalid threshold value"),
        ("120", "out of range"),
        ("nan", "must be finite"),
        ("inf", "must be finite"),
        ("-inf", "must be finite"),
        ("branches=nan", "must be finite"),
    ],
)
def test_parse_threshold_expression_rejects_invalid_input(expression: str, pattern: str) -> None:
    with pytest.raises(ConfigError, match=pattern):
        parse_threshold_expression(expression)
