"""Shared type aliases and enumerations used across covgate."""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MetricKind(StrEnum):
    """Coverage metrics every threshold check walks through."""

    STATEMENTS = "statements"
    BRANCHES = "branches"
    LINES = "lines"
    FUNCTIONS = "functions"


class Scope(StrEnum):
    """Where a threshold rule applies."""

    GLOBAL = "global"
    EACH = "each"


# Evaluation and reporting order.
METRIC_ORDER: tuple[MetricKind, ...] = (
    MetricKind.STATEMENTS,
    MetricKind.BRANCHES,
    MetricKind.LINES,
    MetricKind.FUNCTIONS,
)

FULL_COVERAGE: int = 100

# Label shown instead of a filename for project-wide violations.
GLOBAL_LABEL = "GLOBAL"


__all__ = [
    "FULL_COVERAGE",
    "GLOBAL_LABEL",
    "METRIC_ORDER",
    "MetricKind",
    "Scope",
]
