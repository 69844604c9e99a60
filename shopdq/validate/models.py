"""Data models for validation rules, quality checks and model statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Mapping

from shopdq.validate.constants import STATUS_FAIL, VALIDATION_ERROR_COLUMN
from shopdq.validate.query_utils import quote_ident


@dataclass(frozen=True)
class Column:
    name: str
    dtype: str


@dataclass(frozen=True)
class Relation:
    schema: str
    identifier: str
    columns: tuple[Column, ...] = ()

    @property
    def name(self) -> str:
        return self.identifier

    @property
    def sql(self) -> str:
        return f"{quote_ident(self.schema)}.{quote_ident(self.identifier)}"

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def __str__(self) -> str:
        return f"{self.schema}.{self.identifier}"


@dataclass(frozen=True)
class RuleSpec:
    tag: str
    column: str | None = None
    config: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QuerySpec:
    tag: str
    relation: str
    column: str | None
    sql: str


@dataclass(frozen=True)
class FailureSet:
    """Rows returned by a rule's query; an empty set means the rule passed."""

    rule: RuleSpec
    query: QuerySpec
    columns: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]

    @property
    def passed(self) -> bool:
        return not self.rows

    @property
    def messages(self) -> list[str]:
        return [row.get(VALIDATION_ERROR_COLUMN) for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.rows)


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: str
    passed: bool
    column: str | None = None
    count: int | None = None
    percentage: float | None = None
    details: Mapping[str, Any] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAIL


@dataclass(frozen=True)
class QualityRunSummary:
    relation: str
    environment: str
    checks: tuple[CheckResult, ...]
    warnings: tuple[str, ...]
    errors: tuple[str, ...]
    started_at: datetime
    finished_at: datetime

    @property
    def total_checks(self) -> int:
        return len(self.checks)

    @property
    def passed_checks(self) -> int:
        return sum(1 for check in self.checks if check.passed)

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def success_rate(self) -> float:
        if not self.total_checks:
            return 0.0
        return self.passed_checks / self.total_checks * 100

    @property
    def status(self) -> str:
        if self.errors:
            return "errors"
        if self.warnings:
            return "warnings"
        return "passed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "relation": self.relation,
            "environment": self.environment,
            "total_checks": self.total_checks,
            "passed_checks": self.passed_checks,
            "success_rate": self.success_rate,
            "duration": self.duration,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "checks": [
                {
                    "name": check.name,
                    "column": check.column,
                    "status": check.status,
                    "passed": check.passed,
                    "count": check.count,
                    "percentage": check.percentage,
                    "details": {key: _jsonable(value) for key, value in check.details.items()},
                    "warnings": list(check.warnings),
                    "errors": list(check.errors),
                }
                for check in self.checks
            ],
        }


@dataclass(frozen=True)
class ModelStats:
    relation: Relation
    environment: str
    row_count: int
    row_threshold: int
    duration: float

    @property
    def column_count(self) -> int:
        return len(self.relation.columns)

    @property
    def estimated_size_mb(self) -> float:
        return (self.row_count * self.column_count * 100) / 1024 / 1024

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    @property
    def below_threshold(self) -> bool:
        return 0 < self.row_count < self.row_threshold


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)

