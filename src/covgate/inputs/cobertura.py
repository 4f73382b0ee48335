from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree

from covgate._meta import logger
from covgate.errors import CoverageDataError
from covgate.model.metrics import CoverageSummary, CoverageTotals

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path
    from xml.etree.ElementTree import Element

_COND_RE = re.compile(r"(?P<pct>\d+)\s*%\s*\(\s*(?P<covered>\d+)\s*/\s*(?P<total>\d+)\s*\)")


@dataclass(slots=True)
class CoberturaFile:
    """Coverage of one source file collected from Cobertura ``<class>`` elements.

    Fields
    ------
    lines:
        Line number -> hit count.
    branches:
        Line number -> (covered, total) branch outcomes.
    methods:
        Method key -> whether any of its lines was hit.
    """

    lines: dict[int, int] = field(default_factory=dict)
    branches: dict[int, tuple[int, int]] = field(default_factory=dict)
    methods: dict[str, bool] = field(default_factory=dict)

    def merge(self, other: CoberturaFile) -> None:
        for number, hits in other.lines.items():
            self.lines[number] = self.lines.get(number, 0) + hits
        for number, (covered, total) in other.branches.items():
            prev_covered, prev_total = self.branches.get(number, (0, 0))
            self.branches[number] = (max(prev_covered, covered), max(prev_total, total))
        for key, hit in other.methods.items():
            self.methods[key] = self.methods.get(key, False) or hit


def read_root(path: Path) -> Element:
    """Parse coverage XML and return the root element.

    Accepts Cobertura-style reports, which use `<coverage>` as root.
    """
    try:
        root = ElementTree.parse(path).getroot()
    except (ElementTree.ParseError, DefusedXmlException) as exc:
        msg = f"failed to parse coverage XML {path}: {exc}"
        raise CoverageDataError(msg) from exc
    tag = (root.tag or "").split("}")[-1]  # tolerate namespaces
    if tag.lower() != "coverage":
        msg = f"unexpected root tag {root.tag!r} in {path}"
        raise CoverageDataError(msg)
    return root


def parse_condition_coverage(text: str) -> tuple[int, int] | None:
    if not text:
        return None
    m = _COND_RE.search(text.strip())
    if not m:
        return None
    return int(m.group("covered")), int(m.group("total"))


def _int_attr(elem: Element, name: str, *, where: str) -> int:
    raw = elem.get(name)
    try:
        return int(raw or "")
    except ValueError as exc:
        msg = f"invalid {name}={raw!r} on <{elem.tag}> in {where}"
        raise CoverageDataError(msg) from exc


def _read_lines(parent: Element, *, where: str) -> tuple[dict[int, int], dict[int, tuple[int, int]]]:
    lines: dict[int, int] = {}
    branches: dict[int, tuple[int, int]] = {}
    for line_elem in parent.findall("./lines/line"):
        number = _int_attr(line_elem, "number", where=where)
        hits = _int_attr(line_elem, "hits", where=where)
        lines[number] = lines.get(number, 0) + hits
        cc = parse_condition_coverage(line_elem.get("condition-coverage", "") or "")
        if cc is not None:
            branches[number] = cc
    return lines, branches


def iter_class_files(root: Element, *, where: str) -> Iterable[tuple[str, CoberturaFile]]:
    for cls in root.findall(".//class"):
        filename = cls.get("filename")
        if not filename:
            msg = f"<class> without filename in {where}"
            raise CoverageDataError(msg)
        lines, branches = _read_lines(cls, where=where)
        methods: dict[str, bool] = {}
        for method in cls.findall("./methods/method"):
            method_lines, _ = _read_lines(method, where=where)
            first = min(method_lines, default=0)
            key = f"{method.get('name', '')}{method.get('signature', '')}@{first}"
            methods[key] = any(hits > 0 for hits in method_lines.values())
        yield filename, CoberturaFile(lines=lines, branches=branches, methods=methods)


def load_cobertura(paths: Iterable[Path]) -> dict[str, CoberturaFile]:
    """Read one or more Cobertura reports into a file path -> :class:`CoberturaFile` map."""
    dataset: dict[str, CoberturaFile] = {}
    for path in paths:
        root = read_root(path)
        count = 0
        for filename, data in iter_class_files(root, where=str(path)):
            count += 1
            if filename in dataset:
                dataset[filename].merge(data)
            else:
                dataset[filename] = data
        logger.debug("read %d class(es) from %s", count, path)
    return dataset


class CoberturaSummarizer:
    """Summarizes :class:`CoberturaFile` records.

    Cobertura has no separate statement counters, so statements mirror lines.
    """

    def summarize_file(self, raw: CoberturaFile, /) -> CoverageTotals:
        try:
            lines = CoverageSummary(
                covered=sum(1 for hits in raw.lines.values() if hits > 0),
                total=len(raw.lines),
            )
            branches = CoverageSummary(
                covered=sum(covered for covered, _ in raw.branches.values()),
                total=sum(total for _, total in raw.branches.values()),
            )
            functions = CoverageSummary(
                covered=sum(1 for hit in raw.methods.values() if hit),
                total=len(raw.methods),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            msg = f"malformed cobertura coverage record: {exc!r}"
            raise CoverageDataError(msg) from exc
        return CoverageTotals(statements=lines, branches=branches, lines=lines, functions=functions)


__all__ = [
    "CoberturaFile",
    "CoberturaSummarizer",
    "iter_class_files",
    "load_cobertura",
    "parse_condition_coverage",
    "read_root",
]
