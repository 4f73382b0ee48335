"""Central configuration and constants for ``covgate``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from covgate._meta import logger
from covgate.errors import ConfigError
from covgate.model.thresholds import NO_CONSTRAINT, ThresholdConfig, parse_threshold_rule
from covgate.output.registry import DEFAULT_REPORTERS

if TYPE_CHECKING:
    from pathlib import Path

    from covgate.model.thresholds import ThresholdRule

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

_BASE_PATH_KEYS = ("base_path", "base-path", "basePath")
_KNOWN_KEYS = frozenset({"thresholds", "reporters", "excludes", "colors", *_BASE_PATH_KEYS})
_SCOPE_KEYS = frozenset({"global", "each"})


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """Everything a check run needs besides the coverage data.

    Fields
    ------
    thresholds:
        Global and per-file threshold rules.
    base_path:
        Root used to relativize reported filenames and exclude globs.
    reporters:
        Names of the reporters receiving violations.
    excludes:
        Glob patterns of files left out of every check.
    colors:
        Whether the text reporter styles its output.
    """

    thresholds: ThresholdConfig = ThresholdConfig()
    base_path: str = ""
    reporters: tuple[str, ...] = DEFAULT_REPORTERS
    excludes: tuple[str, ...] = ()
    colors: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CheckConfig:
        """Validate a configuration table (``[tool.covgate]`` or equivalent)."""
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            msg = f"unknown configuration key(s): {', '.join(unknown)}"
            raise ConfigError(msg)

        base_keys = [k for k in _BASE_PATH_KEYS if k in data]
        if len(base_keys) > 1:
            msg = f"conflicting base path keys: {', '.join(base_keys)}"
            raise ConfigError(msg)
        base_path = _require_str(data[base_keys[0]], "base_path") if base_keys else ""

        colors = data.get("colors", True)
        if not isinstance(colors, bool):
            msg = f"'colors' must be a boolean, got {colors!r}"
            raise ConfigError(msg)

        return cls(
            thresholds=parse_thresholds(data.get("thresholds", {})),
            base_path=base_path,
            reporters=_str_tuple(data.get("reporters", DEFAULT_REPORTERS), "reporters"),
            excludes=_str_tuple(data.get("excludes", ()), "excludes"),
            colors=colors,
        )


def parse_thresholds(raw: object) -> ThresholdConfig:
    """Build a :class:`ThresholdConfig` from a ``{"global": ..., "each": ...}`` table.

    A missing scope keeps its default (all metrics 0, never failing); ``None``
    or ``false`` turns the scope off.
    """
    if not isinstance(raw, Mapping):
        msg = f"'thresholds' must be a table, got {raw!r}"
        raise ConfigError(msg)
    unknown = sorted(set(raw) - _SCOPE_KEYS)
    if unknown:
        msg = f"unknown threshold scope(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return ThresholdConfig(
        global_rule=_scope_rule(raw, "global"),
        each_rule=_scope_rule(raw, "each"),
    )


def _scope_rule(raw: Mapping[str, Any], scope: str) -> ThresholdRule | None:
    if scope not in raw:
        return NO_CONSTRAINT
    value = raw[scope]
    if value is None or value is False:
        return None
    return parse_threshold_rule(value)


def _require_str(value: object, key: str) -> str:
    if not isinstance(value, str):
        msg = f"{key!r} must be a string, got {value!r}"
        raise ConfigError(msg)
    return value


def _str_tuple(value: object, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Sequence) or not all(isinstance(v, str) for v in value):
        msg = f"{key!r} must be a list of strings, got {value!r}"
        raise ConfigError(msg)
    return tuple(value)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"failed to read {path}: {e}"
        raise ConfigError(msg) from e


def load_config(config_file: Path | None, *, cwd: Path) -> CheckConfig:
    """Load configuration from *config_file*, or ``[tool.covgate]`` in ``cwd/pyproject.toml``.

    An explicit file may hold either a ``[tool.covgate]`` table or the
    settings at top level.
    """
    if config_file is not None:
        data = _read_toml(config_file)
        table = data.get("tool", {}).get("covgate", data)
        logger.info("using configuration from %s", config_file)
        return CheckConfig.from_mapping(table)

    pyproject = cwd / "pyproject.toml"
    if pyproject.exists():
        table = _read_toml(pyproject).get("tool", {}).get("covgate")
        if table is not None:
            logger.info("using configuration from %s", pyproject)
            return CheckConfig.from_mapping(table)

    return CheckConfig()


__all__ = ["LOG_FORMAT", "CheckConfig", "load_config", "parse_thresholds"]
