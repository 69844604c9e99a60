import pytest

from shopdq.validate.model_stats import collect_model_stats
from shopdq.validate.reporter import ReportLine, render_model_stats


def test_collect_model_stats_for_dim_customers(executor, context, warehouse):
    stats = collect_model_stats("dim_customers", executor, context, row_threshold=50)

    assert stats.row_count == 10
    assert stats.column_count == 7
    assert stats.below_threshold is True
    assert stats.estimated_size_mb == pytest.approx(10 * 7 * 100 / 1024 / 1024)
    assert stats.relation.column_names[0] == "customer_id"
    assert ReportLine("info", "Target: dev") in render_model_stats(stats)


def test_collect_model_stats_for_empty_model(executor, context, make_table):
    make_table("empty_model", "id INTEGER", [])

    stats = collect_model_stats("empty_model", executor, context)

    assert stats.is_empty is True
    assert stats.below_threshold is False
