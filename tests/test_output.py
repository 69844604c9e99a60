import json

import pandas as pd

from shopdq.validate.config import ValidationRule
from shopdq.validate.html_report import build_context, load_summaries, render_quality_report
from shopdq.validate.models import RuleSpec
from shopdq.validate.output import (
    build_check_results,
    build_validation_results,
    persist_dataframe,
    write_json,
)
from shopdq.validate.quality_checks import run_quality_checks
from shopdq.validate.rule_engine import RuleEngine


def _fct_orders_summary(executor, context):
    return run_quality_checks(
        "fct_orders",
        {"null_check_columns": ["amount"], "duplicate_check": "order_id"},
        executor,
        context,
    )


def test_check_results_frame_and_parquet(tmp_path, executor, context, warehouse):
    summary = _fct_orders_summary(executor, context)

    frame = build_check_results([summary], "run-1")
    path = persist_dataframe(frame, "run-1", "dq_check_results", base=tmp_path)

    assert list(frame["check_name"]) == ["row_count", "null_check", "duplicate_check"]
    assert list(frame["status"]) == ["pass", "fail", "pass"]
    assert path == tmp_path / "dq_check_results" / "run_id=run-1" / "dq_check_results.parquet"
    assert len(pd.read_parquet(path)) == 3


def test_validation_results_status_follows_severity(executor, context, warehouse):
    engine = RuleEngine(executor, context=context)
    rules = [
        ValidationRule("payments_positive", "stg_stripe__payments", RuleSpec("positive", "amount"), "warn"),
        ValidationRule("payments_non_negative", "stg_stripe__payments", RuleSpec("non_negative", "amount"), "error"),
        ValidationRule("orders_not_null", "fct_orders", RuleSpec("not_null", "amount"), "error"),
    ]

    frame = build_validation_results(
        [(rule, engine.run_rule(rule.model, rule.spec)) for rule in rules], "run-2"
    )

    assert list(frame["status"]) == ["warn", "pass", "fail"]
    assert list(frame["failure_count"]) == [1, 0, 1]
    samples = json.loads(frame.loc[2, "sample_bad_rows_json"])
    assert samples[0]["order_id"] == "12"
    assert samples[0]["validation_error"] == "NULL value found in column amount"


def test_html_report_renders_summaries(tmp_path, executor, context, warehouse):
    summary = _fct_orders_summary(executor, context)
    write_json({"run_id": "run-3", **summary.to_dict()}, tmp_path / "fct_orders.json")
    (tmp_path / "unrelated.json").write_text("{}")

    summaries = load_summaries(tmp_path)
    html = render_quality_report(build_context(summaries))

    assert len(summaries) == 1
    assert "fct_orders" in html
    assert "completed with ERRORS" in html
    assert "amount has excessive NULL values: 8.33%" in html
    assert "run-3" in html
