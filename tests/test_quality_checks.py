from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from shopdq.validate.errors import ConfigurationError
from shopdq.validate.quality_checks import QualityCheckAggregator, run_quality_checks


@pytest.fixture
def aggregator(executor, context, resolver):
    return QualityCheckAggregator(executor, context=context, resolver=resolver)


@pytest.fixture
def users(con):
    def _build(null_emails):
        con.execute(
            f"""
            CREATE OR REPLACE TABLE users AS
            SELECT
                range AS user_id,
                CASE WHEN range < {null_emails} THEN NULL
                     ELSE 'user' || CAST(range AS VARCHAR) || '@example.com' END AS email
            FROM range(1000)
            """
        )
        return "users"

    return _build


def test_empty_relation_short_circuits(aggregator, executor, resolver, make_table):
    make_table("empty_orders", "order_id INTEGER, order_date DATE", [])
    relation = resolver.resolve("empty_orders")
    executor.queries.clear()

    summary = aggregator.run(
        relation,
        {
            "null_check_columns": ["order_id"],
            "duplicate_check": "order_id",
            "date_range_check": "order_date",
        },
    )

    assert summary.total_checks == 1
    assert summary.passed_checks == 0
    assert summary.errors == ("Empty table - 0 rows",)
    assert summary.warnings == ()
    assert summary.success_rate == 0
    assert [check.name for check in summary.checks] == ["row_count"]
    assert len(executor.queries) == 1


@pytest.mark.parametrize(
    ("null_emails", "status", "passed"),
    [(0, "pass", True), (40, "warn", True), (49, "warn", True), (50, "fail", False), (60, "fail", False)],
)
def test_null_ratio_thresholds(aggregator, users, null_emails, status, passed):
    summary = aggregator.run(users(null_emails), {"null_check_columns": ["email"]})

    check = summary.checks[1]
    assert check.name == "null_check"
    assert check.status == status
    assert check.passed is passed
    assert check.count == null_emails
    assert check.percentage == pytest.approx(null_emails / 10)


def test_null_warning_and_error_messages(aggregator, users):
    warned = aggregator.run(users(40), {"null_check_columns": ["email"]})
    failed = aggregator.run(users(60), {"null_check_columns": ["email"]})

    assert warned.warnings == ("email has 40 NULL values",)
    assert warned.errors == ()
    assert warned.passed_checks == 2
    assert failed.errors == ("email has excessive NULL values: 6.00%",)
    assert failed.passed_checks == 1
    assert failed.success_rate == pytest.approx(50.0)


def test_duplicates_are_warnings_not_passes(aggregator, make_table):
    make_table("orders", "order_id INTEGER", [(1,), (1,), (2,), (3,), (3,)])

    summary = aggregator.run("orders", {"duplicate_check": "order_id"})

    check = summary.checks[-1]
    assert check.status == "warn"
    assert check.passed is False
    assert check.count == 2
    assert summary.warnings == ("Duplicates found in order_id",)
    assert summary.errors == ()
    assert summary.status == "warnings"


def test_future_dates_warn_but_date_check_passes(aggregator, make_table, context):
    make_table(
        "orders",
        "order_id INTEGER, order_date DATE",
        [
            (1, context.today - timedelta(days=10)),
            (2, context.today),
            (3, context.today + timedelta(days=1)),
            (4, None),
        ],
    )

    summary = aggregator.run("orders", {"date_range_check": "order_date"})

    check = summary.checks[-1]
    assert check.name == "date_range"
    assert check.passed is True
    assert check.details["min_date"] == context.today - timedelta(days=10)
    assert check.details["max_date"] == context.today + timedelta(days=1)
    assert check.details["span_days"] == 11
    assert summary.warnings == ("1 records with future dates",)
    assert summary.passed_checks == summary.total_checks == 2


def test_full_run_on_jaffle_marts(executor, context, warehouse):
    summary = run_quality_checks(
        "fct_orders",
        {
            "null_check_columns": ["order_id", "customer_id", "amount"],
            "duplicate_check": "order_id",
            "date_range_check": "order_date",
        },
        executor,
        context,
    )

    assert summary.relation == "fct_orders"
    assert summary.environment == "dev"
    assert summary.total_checks == 6
    assert summary.errors == ("amount has excessive NULL values: 8.33%",)
    assert summary.status == "errors"


def test_unknown_config_key_fails_before_querying(aggregator, executor):
    with pytest.raises(ConfigurationError, match="null_checks"):
        aggregator.run("anything", {"null_checks": ["email"]})

    assert executor.queries == []


def test_summary_is_frozen_and_duration_uses_clock(executor, context, resolver, make_table):
    make_table("orders", "order_id INTEGER", [(1,)])
    ticks = iter(
        [
            datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc),
            datetime(2026, 10, 18, 12, 0, 1, 500000, tzinfo=timezone.utc),
        ]
    )
    aggregator = QualityCheckAggregator(
        executor, context=context, resolver=resolver, clock=lambda: next(ticks)
    )

    summary = aggregator.run("orders")

    assert summary.duration == pytest.approx(1.5)
    assert summary.success_rate == pytest.approx(100.0)
    with pytest.raises(FrozenInstanceError):
        summary.errors = ("late",)
