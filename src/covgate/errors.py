"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class ConfigError(CovgateError):
    """Configuration, threshold expression or reporter selection is invalid."""


class CoverageInputNotFoundError(CovgateError):
    """Coverage input file could not be located on disk."""


class CoverageDataError(CovgateError):
    """Coverage data was found but could not be interpreted."""


__all__ = [
    "ConfigError",
    "CovgateError",
    "CoverageDataError",
    "CoverageInputNotFoundError",
]
