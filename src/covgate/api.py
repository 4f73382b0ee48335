"""Public entry points for checking coverage programmatically."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from covgate.config import CheckConfig
from covgate.engine.check import check
from covgate.inputs.istanbul import IstanbulSummarizer
from covgate.output.base import ReporterOptions
from covgate.output.registry import build_reporters

if TYPE_CHECKING:
    from collections.abc import Mapping

    from covgate.engine.summarize import Summarizer
    from covgate.model.violations import EvaluationResult
    from covgate.output.base import LogSink


def run_check(
    dataset: Mapping[str, Any],
    config: CheckConfig,
    *,
    log: LogSink,
    summarizer: Summarizer[Any] | None = None,
) -> EvaluationResult:
    """Check *dataset* against *config*, writing violations through the configured reporters."""
    reporters = build_reporters(config.reporters, log, ReporterOptions(color=config.colors))
    return check(
        config.thresholds,
        dataset,
        summarizer=summarizer or IstanbulSummarizer(),
        excludes=config.excludes,
        base_path=config.base_path,
        reporters=reporters,
    )


def check_coverage(
    dataset: Mapping[str, Any],
    log: LogSink,
    config: CheckConfig | Mapping[str, Any] | None = None,
    *,
    summarizer: Summarizer[Any] | None = None,
) -> int:
    """Return ``0`` when *dataset* satisfies the thresholds, ``1`` otherwise.

    *dataset* defaults to Istanbul file coverage objects; pass *summarizer*
    for other record types. *config* may be a :class:`CheckConfig` or a raw
    mapping as found in ``[tool.covgate]``.

    *log* receives one line per violation and reporter, without a trailing
    newline. Lines follow the order of ``config.reporters`` for each
    violation in turn, so ``["teamcity", "text"]`` puts the service message
    first.
    """
    if config is None:
        config = CheckConfig()
    elif not isinstance(config, CheckConfig):
        config = CheckConfig.from_mapping(config)
    return run_check(dataset, config, log=log, summarizer=summarizer).exit_code


__all__ = ["check_coverage", "run_check"]
