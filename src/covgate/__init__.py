from covgate._meta import __version__, logger
from covgate.api import check_coverage, run_check
from covgate.config import CheckConfig
from covgate.engine import check
from covgate.model import EvaluationResult, MetricKind, Scope, ThresholdConfig, ViolationRecord

__all__ = [
    "CheckConfig",
    "EvaluationResult",
    "MetricKind",
    "Scope",
    "ThresholdConfig",
    "ViolationRecord",
    "__version__",
    "check",
    "check_coverage",
    "logger",
    "run_check",
]
