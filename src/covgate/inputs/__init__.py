"""Coverage input readers and the summarizers matching their records."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from covgate.errors import ConfigError
from covgate.inputs.cobertura import CoberturaFile, CoberturaSummarizer, load_cobertura
from covgate.inputs.discover import resolve_coverage_paths
from covgate.inputs.istanbul import IstanbulSummarizer, load_istanbul

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from covgate.engine.summarize import Summarizer


class InputFormat(StrEnum):
    ISTANBUL = "istanbul"
    COBERTURA = "cobertura"

    @classmethod
    def for_path(cls, path: Path) -> InputFormat:
        return cls.COBERTURA if path.suffix.lower() == ".xml" else cls.ISTANBUL


def load_dataset(paths: Sequence[Path]) -> tuple[Mapping[str, Any], Summarizer[Any]]:
    """Read *paths* (all of one format) and return the dataset with its summarizer."""
    formats = {InputFormat.for_path(p) for p in paths}
    if len(formats) > 1:
        msg = "cannot mix Cobertura XML and Istanbul JSON inputs in one run"
        raise ConfigError(msg)
    if formats == {InputFormat.COBERTURA}:
        return load_cobertura(paths), CoberturaSummarizer()
    return load_istanbul(paths), IstanbulSummarizer()


__all__ = [
    "CoberturaFile",
    "CoberturaSummarizer",
    "InputFormat",
    "IstanbulSummarizer",
    "load_cobertura",
    "load_dataset",
    "load_istanbul",
    "resolve_coverage_paths",
]
