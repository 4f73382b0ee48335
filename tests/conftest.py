from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from covgate.model.metrics import CoverageSummary, CoverageTotals

Counts = tuple[int, int]


class TotalsSummarizer:
    """Summarizer for datasets whose records already are :class:`CoverageTotals`."""

    def summarize_file(self, raw: CoverageTotals, /) -> CoverageTotals:
        return raw


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def totals_summarizer() -> TotalsSummarizer:
    return TotalsSummarizer()


@pytest.fixture
def make_totals() -> Callable[..., CoverageTotals]:
    """Build totals from ``(covered, total)`` pairs; omitted metrics have nothing to count."""

    def build(
        *,
        statements: Counts = (0, 0),
        branches: Counts = (0, 0),
        lines: Counts = (0, 0),
        functions: Counts = (0, 0),
    ) -> CoverageTotals:
        return CoverageTotals(
            statements=CoverageSummary(*statements),
            branches=CoverageSummary(*branches),
            lines=CoverageSummary(*lines),
            functions=CoverageSummary(*functions),
        )

    return build


@pytest.fixture
def istanbul_file() -> Callable[..., dict[str, Any]]:
    """Build an Istanbul file coverage object.

    Statement ``i`` starts on line ``statement_lines[i]`` (``i + 1`` by default),
    so lines mirror statements unless lines are shared.
    """

    def build(
        path: str,
        *,
        statements: Sequence[int] = (),
        statement_lines: Sequence[int] | None = None,
        functions: Sequence[int] = (),
        branches: Iterable[Sequence[int]] = (),
        skipped_statements: Iterable[int] = (),
    ) -> dict[str, Any]:
        lines = list(statement_lines) if statement_lines is not None else [i + 1 for i in range(len(statements))]
        skipped = set(skipped_statements)
        statement_map: dict[str, Any] = {}
        for i, line in enumerate(lines):
            loc: dict[str, Any] = {"start": {"line": line, "column": 0}, "end": {"line": line, "column": 10}}
            if i in skipped:
                loc["skip"] = True
            statement_map[str(i)] = loc
        branch_hits = [list(b) for b in branches]
        return {
            "path": path,
            "s": {str(i): hits for i, hits in enumerate(statements)},
            "statementMap": statement_map,
            "f": {str(i): hits for i, hits in enumerate(functions)},
            "fnMap": {
                str(i): {"name": f"fn{i}", "line": i + 1, "loc": {"start": {"line": i + 1, "column": 0}}}
                for i in range(len(functions))
            },
            "b": {str(i): hits for i, hits in enumerate(branch_hits)},
            "branchMap": {
                str(i): {
                    "line": i + 1,
                    "type": "if",
                    "locations": [{"start": {"line": i + 1, "column": 0}} for _ in hits],
                }
                for i, hits in enumerate(branch_hits)
            },
        }

    return build


@pytest.fixture
def coverage_json_file(tmp_path: Path) -> Callable[..., Path]:
    def write(mapping: Mapping[str, Any], *, filename: str = "coverage-final.json") -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(mapping), encoding="utf-8")
        return path

    return write


@pytest.fixture
def coverage_xml_content() -> Callable[..., str]:
    def build(mapping: Mapping[str, Mapping[int, int | tuple[int, str]]]) -> str:
        classes: list[str] = []
        for file, lines in mapping.items():
            parts: list[str] = []
            for ln, entry in lines.items():
                if isinstance(entry, tuple):
                    hits, cond = entry
                    parts.append(
                        f'<line number="{ln}" hits="{hits}" branch="true" condition-coverage="{cond}"/>'
                    )
                else:
                    parts.append(f'<line number="{ln}" hits="{entry}"/>')
            classes.append(f'<class filename="{file}"><lines>{"".join(parts)}</lines></class>')
        return (
            "<coverage>"
            f"<packages><package><classes>{''.join(classes)}</classes></package></packages>"
            "</coverage>"
        )

    return build


@pytest.fixture
def coverage_xml_file(
    tmp_path: Path,
    coverage_xml_content: Callable[..., str],
) -> Callable[..., Path]:
    def write(
        mapping: Mapping[str, Mapping[int, int | tuple[int, str]]],
        *,
        filename: str = "coverage.xml",
    ) -> Path:
        xml_file = tmp_path / filename
        xml_file.write_text(coverage_xml_content(mapping), encoding="utf-8")
        return xml_file

    return write
