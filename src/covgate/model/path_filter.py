"""Exclusion of coverage entries by glob pattern."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from pathspec import PathSpec

from covgate._meta import logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

T = TypeVar("T")

_SEPARATOR_RUN = re.compile(r"/{2,}")


def normalize_separators(path: str) -> str:
    """Use forward slashes and collapse duplicate separators."""
    return _SEPARATOR_RUN.sub("/", path.replace("\\", "/"))


def _dedupe(patterns: Sequence[str]) -> tuple[str, ...]:
    # de-dupe, preserve order
    seen: set[str] = set()
    out: list[str] = []
    for p in patterns:
        s = normalize_separators(str(p).strip())
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return tuple(out)


def _strip_dot_prefix(path: str) -> str:
    while path.startswith("./"):
        path = path[2:]
    return path


def _split_root(path: str) -> tuple[bool, str]:
    """Return whether *path* is absolute and its root-relative remainder."""
    path = _strip_dot_prefix(normalize_separators(path))
    return path.startswith("/"), _strip_dot_prefix(path.lstrip("/"))


@dataclass(frozen=True, slots=True)
class _JoinedPattern:
    pattern: str
    absolute: bool
    floating: bool
    spec: PathSpec

    @classmethod
    def build(cls, pattern: str, base: str) -> _JoinedPattern:
        absolute, body = _split_root(f"{base}/{pattern}" if base else pattern)
        # leading "/" anchors the line at the base, slash-less patterns included
        return cls(
            pattern=pattern,
            absolute=absolute,
            floating=body.startswith("**/"),
            spec=PathSpec.from_lines("gitwildmatch", [f"/{body}"]),
        )

    def matches(self, filename: str) -> bool:
        absolute, body = _split_root(filename)
        if absolute != self.absolute and not self.floating:
            return False
        return self.spec.match_file(body)


@dataclass(frozen=True, slots=True)
class ExcludeFilter:
    """Glob-based exclusion of dataset keys.

    Every pattern is joined onto ``base`` and matched against the whole key
    with gitignore-style wildcards, so ``index.js`` only names the file at
    the base and ``**/index.js`` names it at any depth. Absolute keys only
    match absolute joined patterns, unless the pattern starts with ``**/``.
    """

    patterns: tuple[str, ...]
    base: str
    _joined: tuple[_JoinedPattern, ...]

    def __init__(self, patterns: Sequence[str] = (), *, base: str = "") -> None:
        pats = _dedupe(patterns)
        norm_base = normalize_separators(base.strip())
        object.__setattr__(self, "patterns", pats)
        object.__setattr__(self, "base", norm_base if norm_base == "/" else norm_base.rstrip("/"))
        object.__setattr__(self, "_joined", tuple(_JoinedPattern.build(p, self.base) for p in pats))

    def matching_pattern(self, filename: str) -> str | None:
        """Return the first pattern excluding *filename*, if any."""
        for joined in self._joined:
            if joined.matches(filename):
                return joined.pattern
        return None

    def excludes(self, filename: str) -> bool:
        return self.matching_pattern(filename) is not None

    def apply(self, dataset: Mapping[str, T]) -> dict[str, T]:
        """Return a new mapping without the excluded entries, preserving order."""
        kept: dict[str, T] = {}
        for filename, payload in dataset.items():
            pattern = self.matching_pattern(filename) if self._joined else None
            if pattern is not None:
                logger.debug("excluding %s (matched %r)", filename, pattern)
                continue
            kept[filename] = payload
        return kept


def display_path(filename: str, base_path: str = "") -> str:
    """Return *filename* relative to *base_path* (the working directory when empty)."""
    try:
        rel = os.path.relpath(filename, base_path or os.curdir)
    except ValueError:
        # different drive on Windows
        rel = filename
    return normalize_separators(rel)


def exclude_files(dataset: Mapping[str, T], patterns: Sequence[str], base_path: str = "") -> dict[str, T]:
    """Return a copy of *dataset* without entries matching any of *patterns*."""
    return ExcludeFilter(patterns, base=base_path).apply(dataset)


__all__ = ["ExcludeFilter", "display_path", "exclude_files", "normalize_separators"]
