"""Summarizer seam between raw coverage formats and threshold evaluation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

from covgate.model.metrics import CoverageTotals

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

RawT = TypeVar("RawT")
RawT_contra = TypeVar("RawT_contra", contravariant=True)


class Summarizer(Protocol[RawT_contra]):
    """Turns the raw coverage of one file into per-metric totals.

    Implementations raise :class:`covgate.errors.CoverageDataError` for data
    they cannot interpret.
    """

    def summarize_file(self, raw: RawT_contra, /) -> CoverageTotals: ...


def summarize_files(
    dataset: Mapping[str, RawT], summarizer: Summarizer[RawT]
) -> Iterator[tuple[str, CoverageTotals]]:
    """Yield ``(filename, totals)`` in dataset order."""
    for filename, raw in dataset.items():
        yield filename, summarizer.summarize_file(raw)


def summarize_global(dataset: Mapping[str, RawT], summarizer: Summarizer[RawT]) -> CoverageTotals:
    """Merge the totals of every file in *dataset*."""
    return CoverageTotals.merge(totals for _, totals in summarize_files(dataset, summarizer))


__all__ = ["Summarizer", "summarize_files", "summarize_global"]
