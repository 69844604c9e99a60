"""Build tabular views of validation results and persist them."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

import pandas as pd

from shopdq.validate.config import ValidationRule
from shopdq.validate.models import FailureSet, QualityRunSummary
from shopdq.validate.paths import DATA_MARTS_BASE
from shopdq.validate.query_utils import stringify_value

SAMPLE_LIMIT = 5

CHECK_RESULT_COLUMNS = [
    "run_id",
    "relation",
    "environment",
    "check_name",
    "column",
    "status",
    "passed",
    "count",
    "percentage",
    "warnings",
    "errors",
]

VALIDATION_RESULT_COLUMNS = [
    "run_id",
    "check_id",
    "model",
    "rule_type",
    "column",
    "severity",
    "status",
    "failure_count",
    "sample_bad_rows_json",
]


def build_check_results(summaries: Iterable[QualityRunSummary], run_id: str) -> pd.DataFrame:
    records: list[dict[str, object]] = []
    for summary in summaries:
        for check in summary.checks:
            records.append(
                {
                    "run_id": run_id,
                    "relation": summary.relation,
                    "environment": summary.environment,
                    "check_name": check.name,
                    "column": check.column,
                    "status": check.status,
                    "passed": check.passed,
                    "count": check.count,
                    "percentage": check.percentage,
                    "warnings": json.dumps(list(check.warnings), ensure_ascii=False),
                    "errors": json.dumps(list(check.errors), ensure_ascii=False),
                }
            )
    return pd.DataFrame(records, columns=CHECK_RESULT_COLUMNS)


def build_validation_results(
    results: Iterable[tuple[ValidationRule, FailureSet]], run_id: str
) -> pd.DataFrame:
    records: list[dict[str, object]] = []
    for rule, failures in results:
        samples = [
            {key: stringify_value(value) for key, value in row.items()}
            for row in failures.rows[:SAMPLE_LIMIT]
        ]
        if failures.passed:
            status = "pass"
        else:
            status = "fail" if rule.severity == "error" else "warn"
        records.append(
            {
                "run_id": run_id,
                "check_id": rule.id,
                "model": rule.model,
                "rule_type": rule.spec.tag,
                "column": rule.spec.column,
                "severity": rule.severity,
                "status": status,
                "failure_count": len(failures),
                "sample_bad_rows_json": json.dumps(samples, ensure_ascii=False),
            }
        )
    return pd.DataFrame(records, columns=VALIDATION_RESULT_COLUMNS)


def persist_dataframe(
    df: pd.DataFrame, run_id: str, folder: str, base: Path | None = None
) -> Path:
    dest = (base or DATA_MARTS_BASE) / folder / f"run_id={run_id}"
    dest.mkdir(parents=True, exist_ok=True)
    path = dest / f"{folder}.parquet"
    df.to_parquet(path, index=False)
    return path


def write_json(payload: dict[str, object], target: Path) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
    return target
