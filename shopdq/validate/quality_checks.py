"""Run the standard sequence of quality checks against one relation.

The sequence is fixed: row count first, then one null check per configured
column, then the optional duplicate and date-range checks. An empty relation
is recorded as an error and ends the run, since the later checks have no rows
to measure. Only an empty table and a null ratio at or above
``NULL_FAIL_PERCENTAGE`` are errors; duplicates and future dates are warnings.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from shopdq.validate.config import QualityCheckConfig
from shopdq.validate.constants import (
    EMPTY_TABLE_ERROR,
    NULL_FAIL_PERCENTAGE,
    STATUS_FAIL,
    STATUS_PASS,
    STATUS_WARN,
)
from shopdq.validate.context import ExecutionContext
from shopdq.validate.models import CheckResult, QualityRunSummary, Relation
from shopdq.validate.query_utils import QueryExecutor, quote_ident, sql_value
from shopdq.validate.relations import RelationResolver

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _RunState:
    def __init__(self) -> None:
        self.checks: list[CheckResult] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def record(self, result: CheckResult) -> None:
        self.checks.append(result)
        self.warnings.extend(result.warnings)
        self.errors.extend(result.errors)

    def finalize(
        self, relation: str, environment: str, started_at: datetime, finished_at: datetime
    ) -> QualityRunSummary:
        return QualityRunSummary(
            relation=relation,
            environment=environment,
            checks=tuple(self.checks),
            warnings=tuple(self.warnings),
            errors=tuple(self.errors),
            started_at=started_at,
            finished_at=finished_at,
        )


class QualityCheckAggregator:
    def __init__(
        self,
        executor: QueryExecutor,
        context: ExecutionContext | None = None,
        resolver: RelationResolver | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._executor = executor
        self._context = context or ExecutionContext()
        self._resolver = resolver or RelationResolver(executor)
        self._clock = clock

    def run(
        self,
        relation: Relation | str,
        config: QualityCheckConfig | Mapping[str, Any] | None = None,
    ) -> QualityRunSummary:
        checks = QualityCheckConfig.coerce(config)
        relation = self._resolver.resolve(relation)
        started_at = self._clock()
        state = _RunState()

        row_count = self.check_row_count(relation)
        state.record(row_count)
        if row_count.failed:
            logger.error("%s is empty; skipping remaining checks", relation)
        else:
            total_rows = int(row_count.count or 0)
            for column in checks.null_check_columns:
                state.record(self.check_nulls(relation, column, total_rows))
            if checks.duplicate_check:
                state.record(self.check_duplicates(relation, checks.duplicate_check))
            if checks.date_range_check:
                state.record(self.check_date_range(relation, checks.date_range_check))

        summary = state.finalize(
            relation.name, self._context.target_name, started_at, self._clock()
        )
        logger.info(
            "Quality checks for %s: %d/%d passed, %d warning(s), %d error(s)",
            relation,
            summary.passed_checks,
            summary.total_checks,
            len(summary.warnings),
            len(summary.errors),
        )
        return summary

    def check_row_count(self, relation: Relation) -> CheckResult:
        total_rows = int(
            self._executor.scalar(f"SELECT COUNT(*) AS total_rows FROM {relation.sql}")
        )
        if total_rows > 0:
            return CheckResult(name="row_count", status=STATUS_PASS, passed=True, count=total_rows)
        return CheckResult(
            name="row_count",
            status=STATUS_FAIL,
            passed=False,
            count=0,
            errors=(EMPTY_TABLE_ERROR,),
        )

    def check_nulls(self, relation: Relation, column: str, total_rows: int) -> CheckResult:
        result = self._executor.execute(
            f"""
            SELECT
                COUNT(*) AS null_count,
                COUNT(*) * 100.0 / NULLIF({int(total_rows)}, 0) AS null_percentage
            FROM {relation.sql}
            WHERE {quote_ident(column)} IS NULL
            """
        )
        null_count = int(result.value(0))
        raw_pct = result.value(1)
        null_pct = float(raw_pct) if raw_pct is not None else 0.0
        if null_count == 0:
            return CheckResult(
                name="null_check", column=column, status=STATUS_PASS, passed=True,
                count=0, percentage=0.0,
            )
        if null_pct < NULL_FAIL_PERCENTAGE:
            return CheckResult(
                name="null_check",
                column=column,
                status=STATUS_WARN,
                passed=True,
                count=null_count,
                percentage=null_pct,
                warnings=(f"{column} has {null_count} NULL values",),
            )
        return CheckResult(
            name="null_check",
            column=column,
            status=STATUS_FAIL,
            passed=False,
            count=null_count,
            percentage=null_pct,
            errors=(f"{column} has excessive NULL values: {null_pct:.2f}%",),
        )

    def check_duplicates(self, relation: Relation, column: str) -> CheckResult:
        col = quote_ident(column)
        dup_count = int(
            self._executor.scalar(
                f"""
                SELECT COUNT(*) AS dup_count
                FROM (
                    SELECT {col}, COUNT(*) AS cnt
                    FROM {relation.sql}
                    GROUP BY {col}
                    HAVING COUNT(*) > 1
                ) duplicates
                """
            )
        )
        if dup_count == 0:
            return CheckResult(
                name="duplicate_check", column=column, status=STATUS_PASS, passed=True, count=0
            )
        return CheckResult(
            name="duplicate_check",
            column=column,
            status=STATUS_WARN,
            passed=False,
            count=dup_count,
            warnings=(f"Duplicates found in {column}",),
        )

    def check_date_range(self, relation: Relation, column: str) -> CheckResult:
        col = quote_ident(column)
        result = self._executor.execute(
            f"""
            SELECT
                MIN({col}) AS min_date,
                MAX({col}) AS max_date,
                date_diff('day', MIN({col}), MAX({col})) AS date_span_days
            FROM {relation.sql}
            WHERE {col} IS NOT NULL
            """
        )
        min_date, max_date, span = result.rows[0]
        future_count = int(
            self._executor.scalar(
                f"""
                SELECT COUNT(*) AS future_count
                FROM {relation.sql}
                WHERE {col} > {sql_value(self._context.today)}
                """
            )
        )
        warnings: tuple[str, ...] = ()
        if future_count > 0:
            warnings = (f"{future_count} records with future dates",)
        return CheckResult(
            name="date_range",
            column=column,
            status=STATUS_WARN if warnings else STATUS_PASS,
            passed=True,
            count=future_count,
            details={
                "min_date": min_date,
                "max_date": max_date,
                "span_days": span,
                "future_count": future_count,
            },
            warnings=warnings,
        )


def run_quality_checks(
    relation: Relation | str,
    config: QualityCheckConfig | Mapping[str, Any] | None,
    executor: QueryExecutor,
    context: ExecutionContext | None = None,
    resolver: RelationResolver | None = None,
) -> QualityRunSummary:
    aggregator = QualityCheckAggregator(executor, context=context, resolver=resolver)
    return aggregator.run(relation, config)
