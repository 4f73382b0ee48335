"""Domain model for covgate (pure types + policy; no IO)."""

from .metrics import CoverageSummary, CoverageTotals, pct
from .path_filter import ExcludeFilter, exclude_files
from .thresholds import (
    NO_CONSTRAINT,
    PerMetricThreshold,
    ThresholdCheck,
    ThresholdConfig,
    ThresholdRule,
    UniformThreshold,
    evaluate_rule,
    evaluate_threshold,
    parse_threshold_expression,
    parse_threshold_rule,
)
from .types import GLOBAL_LABEL, METRIC_ORDER, MetricKind, Scope
from .violations import EvaluationResult, ViolationRecord

__all__ = [
    "GLOBAL_LABEL",
    "METRIC_ORDER",
    "NO_CONSTRAINT",
    "CoverageSummary",
    "CoverageTotals",
    "EvaluationResult",
    "ExcludeFilter",
    "MetricKind",
    "PerMetricThreshold",
    "Scope",
    "ThresholdCheck",
    "ThresholdConfig",
    "ThresholdRule",
    "UniformThreshold",
    "ViolationRecord",
    "evaluate_rule",
    "evaluate_threshold",
    "exclude_files",
    "parse_threshold_expression",
    "parse_threshold_rule",
    "pct",
]
