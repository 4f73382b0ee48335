from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from covgate.errors import CoverageInputNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

# Tried in order when no coverage input is given.
DEFAULT_CANDIDATES: tuple[str, ...] = (
    "coverage/coverage-final.json",
    "coverage-final.json",
    "coverage.xml",
)


def resolve_coverage_paths(cov_paths: Sequence[Path] | None, *, cwd: Path) -> tuple[Path, ...]:
    """Resolve coverage inputs.

    Rules
    -----
    - If `cov_paths` are provided: they must exist.
    - Else: the first existing entry of `DEFAULT_CANDIDATES` below `cwd`.
    """
    paths = tuple(cov_paths or ())
    if paths:
        missing = [p for p in paths if not p.exists()]
        if missing:
            msg = f"coverage input not found: {', '.join(str(p) for p in missing)}"
            raise CoverageInputNotFoundError(msg)
        return tuple(p.resolve() for p in paths)

    for candidate in DEFAULT_CANDIDATES:
        default = cwd / candidate
        if default.exists():
            return (default.resolve(),)

    msg = f"no coverage input provided and none of {', '.join(DEFAULT_CANDIDATES)} found"
    raise CoverageInputNotFoundError(msg)


__all__ = ["DEFAULT_CANDIDATES", "resolve_coverage_paths"]
