"""Istanbul ``coverage-final.json`` reading, merging and summarizing.

A file coverage object carries hit counters keyed by id (``s`` for
statements, ``f`` for functions, ``b`` for branches, one counter per branch
location) next to location maps (``statementMap``, ``fnMap``,
``branchMap``) that may mark items as skipped. ``l`` (line -> hits) is
optional and derived from the statement map when absent.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from covgate._meta import logger
from covgate.errors import CoverageDataError
from covgate.model.metrics import CoverageSummary, CoverageTotals

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

FileCoverage = Mapping[str, Any]


def _entry(mapping: Mapping[str, Any] | None, key: str) -> Mapping[str, Any]:
    if not mapping:
        return {}
    value = mapping.get(key)
    return value if isinstance(value, Mapping) else {}


def _simple_totals(hits: Mapping[str, int], locations: Mapping[str, Any] | None = None) -> CoverageSummary:
    covered = total = skipped = 0
    for key, count in hits.items():
        hit = bool(count)
        skip = bool(_entry(locations, key).get("skip"))
        total += 1
        if hit or skip:
            covered += 1
        if skip and not hit:
            skipped += 1
    return CoverageSummary(covered=covered, total=total, skipped=skipped)


def _branch_totals(hits: Mapping[str, list[int]], branch_map: Mapping[str, Any] | None) -> CoverageSummary:
    covered = total = skipped = 0
    for key, counts in hits.items():
        locations = _entry(branch_map, key).get("locations") or []
        for i, count in enumerate(counts):
            hit = count > 0
            location = locations[i] if i < len(locations) and isinstance(locations[i], Mapping) else {}
            skip = bool(location.get("skip"))
            if hit or skip:
                covered += 1
            if skip and not hit:
                skipped += 1
        total += len(counts)
    return CoverageSummary(covered=covered, total=total, skipped=skipped)


def line_hits(fc: FileCoverage) -> dict[str, int]:
    """Return line -> hits, taking the highest count of the statements starting on each line."""
    if fc.get("l") is not None:
        return dict(fc["l"])
    statement_map = fc["statementMap"]
    lines: dict[str, int] = {}
    for key, count in fc["s"].items():
        location = statement_map[key]
        line = str(location["start"]["line"])
        hits = 1 if count == 0 and location.get("skip") else count
        if line not in lines or lines[line] < hits:
            lines[line] = hits
    return lines


class IstanbulSummarizer:
    """Summarizes Istanbul file coverage objects."""

    def summarize_file(self, raw: FileCoverage, /) -> CoverageTotals:
        try:
            return CoverageTotals(
                statements=_simple_totals(raw["s"], raw.get("statementMap")),
                branches=_branch_totals(raw["b"], raw.get("branchMap")),
                lines=_simple_totals(line_hits(raw)),
                functions=_simple_totals(raw["f"], raw.get("fnMap")),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            where = raw.get("path", "<unknown>") if isinstance(raw, Mapping) else "<unknown>"
            msg = f"malformed istanbul coverage for {where}: {exc!r}"
            raise CoverageDataError(msg) from exc


def merge_file_coverage(first: FileCoverage, second: FileCoverage) -> dict[str, Any]:
    """Return a new file coverage object with the counters of both inputs added up."""
    try:
        merged: dict[str, Any] = copy.deepcopy(dict(first))
        merged.pop("l", None)
        for counter in ("s", "f"):
            target = merged.setdefault(counter, {})
            for key, count in second.get(counter, {}).items():
                target[key] = target.get(key, 0) + count
        branches = merged.setdefault("b", {})
        for key, counts in second.get("b", {}).items():
            current = list(branches.get(key, []))
            for i, count in enumerate(counts):
                if i < len(current):
                    current[i] += count
                else:
                    current.append(count)
            branches[key] = current
    except (TypeError, AttributeError) as exc:
        msg = f"cannot merge istanbul coverage for {first.get('path', '<unknown>')}: {exc!r}"
        raise CoverageDataError(msg) from exc
    return merged


def merge_coverage(reports: Iterable[Mapping[str, FileCoverage]]) -> dict[str, Any]:
    """Combine several coverage maps; entries for the same file are merged."""
    combined: dict[str, Any] = {}
    for report in reports:
        for filename, fc in report.items():
            if filename in combined:
                combined[filename] = merge_file_coverage(combined[filename], fc)
            else:
                combined[filename] = copy.deepcopy(dict(fc))
    return combined


def read_coverage_json(path: Path) -> dict[str, Any]:
    """Parse one ``coverage-final.json`` and check its top-level shape."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"invalid coverage JSON in {path}: {exc}"
        raise CoverageDataError(msg) from exc
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        msg = f"{path} is not an istanbul coverage map (file path -> file coverage)"
        raise CoverageDataError(msg)
    logger.debug("read %d file(s) from %s", len(data), path)
    return data


def load_istanbul(paths: Iterable[Path]) -> dict[str, Any]:
    return merge_coverage(read_coverage_json(p) for p in paths)


__all__ = [
    "IstanbulSummarizer",
    "line_hits",
    "load_istanbul",
    "merge_coverage",
    "merge_file_coverage",
    "read_coverage_json",
]
