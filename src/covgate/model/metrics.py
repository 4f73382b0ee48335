from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate.model.types import FULL_COVERAGE, METRIC_ORDER, MetricKind

if TYPE_CHECKING:
    from collections.abc import Iterable


def pct(covered: int, total: int, *, full: float = float(FULL_COVERAGE)) -> float:
    """Return the coverage percentage rounded half-up to two decimals.

    Defaults to `full` when no total exists.
    """
    if total == 0:
        return full
    return math.floor((1000 * full * covered / total + 5) / 10) / 100


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Covered/total counts for one metric in one scope.

    Fields
    ------
    covered:
        Items that were hit (or explicitly skipped).
    total:
        Countable items.
    skipped:
        Items counted as covered only because they were marked as skipped.
    """

    covered: int = 0
    total: int = 0
    skipped: int = 0

    def __post_init__(self) -> None:
        if self.covered < 0 or self.total < 0 or self.skipped < 0:
            msg = f"coverage counts must be non-negative: {self.covered}/{self.total}"
            raise ValueError(msg)
        if self.covered > self.total:
            msg = f"covered count exceeds total: {self.covered}/{self.total}"
            raise ValueError(msg)

    @property
    def pct(self) -> float:
        return pct(self.covered, self.total)

    @property
    def gap(self) -> int:
        """Uncovered items as a non-positive number (``covered - total``)."""
        return self.covered - self.total

    def __add__(self, other: CoverageSummary) -> CoverageSummary:
        return CoverageSummary(
            covered=self.covered + other.covered,
            total=self.total + other.total,
            skipped=self.skipped + other.skipped,
        )


@dataclass(frozen=True, slots=True)
class CoverageTotals:
    """One :class:`CoverageSummary` per metric kind."""

    statements: CoverageSummary = CoverageSummary()
    branches: CoverageSummary = CoverageSummary()
    lines: CoverageSummary = CoverageSummary()
    functions: CoverageSummary = CoverageSummary()

    def __getitem__(self, metric: MetricKind) -> CoverageSummary:
        return getattr(self, MetricKind(metric).value)

    @classmethod
    def merge(cls, items: Iterable[CoverageTotals]) -> CoverageTotals:
        """Sum counts across *items*; an empty iterable yields empty totals."""
        merged = {metric.value: CoverageSummary() for metric in METRIC_ORDER}
        for item in items:
            for metric in METRIC_ORDER:
                merged[metric.value] += item[metric]
        return cls(**merged)


__all__ = ["CoverageSummary", "CoverageTotals", "pct"]
