"""Exceptions raised by the validation engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A rule, check or profile is misconfigured; raised before any query runs."""


class RelationNotFoundError(RuntimeError):
    pass
