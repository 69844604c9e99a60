"""Helpers for loading rule and quality-check configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from shopdq.validate.constants import SEVERITIES
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.models import RuleSpec
from shopdq.validate.rule_catalog import get_definition

QUALITY_CHECK_KEYS = ("null_check_columns", "duplicate_check", "date_range_check")


@dataclass(frozen=True)
class QualityCheckConfig:
    null_check_columns: tuple[str, ...] = ()
    duplicate_check: str | None = None
    date_range_check: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "QualityCheckConfig":
        raw = raw or {}
        unexpected = sorted(set(raw) - set(QUALITY_CHECK_KEYS))
        if unexpected:
            raise ConfigurationError(
                f"Unsupported quality check option(s): {', '.join(unexpected)}. "
                f"Allowed keys are: {', '.join(QUALITY_CHECK_KEYS)}"
            )
        columns = raw.get("null_check_columns") or []
        if isinstance(columns, str) or not isinstance(columns, (list, tuple)):
            raise ConfigurationError("null_check_columns must be a list of column names")
        return cls(
            null_check_columns=tuple(_column_name("null_check_columns", col) for col in columns),
            duplicate_check=_optional_column("duplicate_check", raw.get("duplicate_check")),
            date_range_check=_optional_column("date_range_check", raw.get("date_range_check")),
        )

    @classmethod
    def coerce(cls, value: "QualityCheckConfig | Mapping[str, Any] | None") -> "QualityCheckConfig":
        if isinstance(value, cls):
            return value
        return cls.from_mapping(value)


def _column_name(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{key} entries must be non-empty column names")
    return value.strip()


def _optional_column(key: str, value: Any) -> str | None:
    if value in (None, ""):
        return None
    return _column_name(key, value)


@dataclass(frozen=True)
class ValidationRule:
    id: str
    model: str
    spec: RuleSpec
    severity: str
    description: str = ""


@dataclass(frozen=True)
class RuleSuite:
    validations: tuple[ValidationRule, ...] = ()
    quality_checks: Mapping[str, QualityCheckConfig] = field(default_factory=dict)
    model_stats: Mapping[str, int] = field(default_factory=dict)

    def for_model(self, model: str) -> list[ValidationRule]:
        return [rule for rule in self.validations if rule.model == model]


def _parse_validation(model: str, index: int, entry: Mapping[str, Any]) -> ValidationRule:
    if not isinstance(entry, Mapping) or "rule" not in entry:
        raise ConfigurationError(f"Validation #{index + 1} for '{model}' must define a rule")
    tag = str(entry["rule"]).strip()
    column = entry.get("column")
    config = entry.get("config") or {}
    if not isinstance(config, Mapping):
        raise ConfigurationError(f"config for '{model}' validation '{tag}' must be a mapping")
    spec = RuleSpec(tag=tag, column=column, config=dict(config))
    get_definition(tag).resolve_options(spec)
    severity = str(entry.get("severity", "error")).lower()
    if severity not in SEVERITIES:
        raise ConfigurationError(
            f"severity must be one of {', '.join(SEVERITIES)} (got '{severity}')"
        )
    rule_id = entry.get("id") or "_".join(part for part in (model, column, tag) if part)
    return ValidationRule(
        id=str(rule_id),
        model=model,
        spec=spec,
        severity=severity,
        description=entry.get("description", ""),
    )


def load_rules(path: Path) -> RuleSuite:
    raw = yaml.safe_load(path.read_text()) or {}
    validations: dict[str, Iterable[Mapping[str, Any]]] = raw.get("validations") or {}
    rules: list[ValidationRule] = []
    for model, entries in validations.items():
        for index, entry in enumerate(entries or []):
            rules.append(_parse_validation(model, index, entry))
    quality_checks = {
        model: QualityCheckConfig.from_mapping(payload)
        for model, payload in (raw.get("quality_checks") or {}).items()
    }
    model_stats: dict[str, int] = {}
    for model, payload in (raw.get("model_stats") or {}).items():
        threshold = (payload or {}).get("row_threshold", 1000)
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise ConfigurationError(f"row_threshold for '{model}' must be a non-negative integer")
        model_stats[model] = threshold
    return RuleSuite(
        validations=tuple(rules),
        quality_checks=quality_checks,
        model_stats=model_stats,
    )
