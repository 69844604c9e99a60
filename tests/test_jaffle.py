import pytest

from shopdq.jaffle.build import MODELS, build_warehouse, clean_stale_models
from shopdq.validate.context import ExecutionContext


def test_dev_build_places_models_in_target_schema(con, warehouse):
    assert set(warehouse) == {model.name for model in MODELS}
    assert set(warehouse.values()) == {"main"}
    amounts = con.execute(
        'SELECT amount FROM main."stg_stripe__payments" WHERE id IN (1, 3) ORDER BY id'
    ).fetchall()
    assert amounts == [(10.0,), (1.0,)]


def test_prod_build_uses_layer_schemas(con):
    built = build_warehouse(con, ExecutionContext(target_name="prod", schema="analytics"))

    assert built["stg_jaffle_shop__customers"] == "stg"
    assert built["int_orders__pivoted"] == "int"
    assert built["fct_orders"] == "mrt"


def test_marts_aggregate_orders_and_payments(con, warehouse):
    customer = con.execute(
        "SELECT number_of_orders, lifetime_value FROM main.dim_customers WHERE customer_id = 1"
    ).fetchone()
    pivoted = con.execute(
        "SELECT payment_method__gift_card FROM main.int_orders__pivoted WHERE order_id = 8"
    ).fetchone()
    spine = con.execute("SELECT COUNT(DISTINCT order_date) FROM main.customer_daily_orders").fetchone()

    assert customer == (2, pytest.approx(27.0))
    assert pivoted == (pytest.approx(23.0),)
    assert spine == (90,)


def test_clean_stale_models_is_a_dry_run_by_default(con, warehouse):
    con.execute("CREATE TABLE main.old_orders AS SELECT 1 AS id")
    con.execute("CREATE VIEW main.old_customers AS SELECT 1 AS id")

    statements = clean_stale_models(con)

    assert statements == [
        'DROP VIEW "main"."old_customers"',
        'DROP TABLE "main"."old_orders"',
    ]
    assert con.execute("SELECT COUNT(*) FROM main.old_orders").fetchone() == (1,)


def test_clean_stale_models_drops_only_unknown_objects(con, warehouse):
    con.execute("CREATE TABLE main.old_orders AS SELECT 1 AS id")

    clean_stale_models(con, dry_run=False)

    remaining = {
        row[0]
        for row in con.execute(
            "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
        ).fetchall()
    }
    assert remaining == {model.name for model in MODELS}
    assert clean_stale_models(con) == []
    assert con.execute('SELECT COUNT(*) FROM "raw"."raw_orders"').fetchone() == (12,)
