"""Build the jaffle_shop demo warehouse (seeds, staging, marts) in DuckDB."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import duckdb

from shopdq.jaffle.seeds import SEED_COLUMNS, SEEDS
from shopdq.sql_helpers import cents_to_dollars, generate_schema_name
from shopdq.validate.context import ExecutionContext
from shopdq.validate.query_utils import quote_ident

logger = logging.getLogger(__name__)

RAW_SCHEMA = "raw"
PAYMENT_METHODS = ("credit_card", "coupon", "bank_transfer", "gift_card")

Ref = Callable[[str], str]


@dataclass(frozen=True)
class ModelDefinition:
    name: str
    custom_schema: str
    materialized: str
    render: Callable[[Ref, Ref], str]


def _stg_customers(ref: Ref, source: Ref) -> str:
    return f"""
    SELECT
        id AS customer_id,
        first_name,
        last_name
    FROM {source("raw_customers")}
    """


def _stg_orders(ref: Ref, source: Ref) -> str:
    return f"""
    SELECT
        id AS order_id,
        user_id AS customer_id,
        order_date,
        status
    FROM {source("raw_orders")}
    """


def _stg_payments(ref: Ref, source: Ref) -> str:
    return f"""
    SELECT
        {cents_to_dollars("amount")} AS amount,
        created,
        id,
        orderid AS order_id,
        paymentmethod AS payment_method,
        status,
        _batched_at
    FROM {source("raw_payments")}
    """


def _int_orders_pivoted(ref: Ref, source: Ref) -> str:
    pivots = ",\n        ".join(
        f"SUM(CASE WHEN payment_method = '{method}' THEN amount ELSE 0 END) "
        f"AS payment_method__{method}"
        for method in PAYMENT_METHODS
    )
    return f"""
    WITH payments AS (
        SELECT order_id, amount, payment_method
        FROM {ref("stg_stripe__payments")}
        WHERE status = 'success'
    )
    SELECT
        order_id,
        {pivots}
    FROM payments
    GROUP BY order_id
    """


def _dim_customers(ref: Ref, source: Ref) -> str:
    return f"""
    WITH customers AS (
        SELECT customer_id, first_name, last_name
        FROM {ref("stg_jaffle_shop__customers")}
    ),
    orders AS (
        SELECT o.order_id, o.customer_id, o.order_date, o.status, p.amount
        FROM {ref("stg_jaffle_shop__orders")} AS o
        LEFT JOIN {ref("stg_stripe__payments")} AS p ON o.order_id = p.order_id
    ),
    customer_orders AS (
        SELECT
            customer_id,
            MIN(order_date) AS first_order_date,
            MAX(order_date) AS most_recent_order_date,
            COUNT(order_id) AS number_of_orders,
            SUM(amount) AS lifetime_value
        FROM orders
        GROUP BY 1
    )
    SELECT
        customers.customer_id,
        customers.first_name,
        customers.last_name,
        customer_orders.first_order_date,
        customer_orders.most_recent_order_date,
        COALESCE(customer_orders.number_of_orders, 0) AS number_of_orders,
        COALESCE(customer_orders.lifetime_value, 0) AS lifetime_value
    FROM customers
    LEFT JOIN customer_orders USING (customer_id)
    """


def _fct_orders(ref: Ref, source: Ref) -> str:
    return f"""
    WITH payment AS (
        SELECT order_id, amount, status AS payment_status
        FROM {ref("stg_stripe__payments")}
        WHERE status = 'success'
    ),
    orders AS (
        SELECT order_id, customer_id, order_date, status
        FROM {ref("stg_jaffle_shop__orders")}
    )
    SELECT
        orders.order_date,
        orders.order_id,
        orders.customer_id,
        SUM(payment.amount) AS amount
    FROM orders
    LEFT JOIN payment USING (order_id)
    GROUP BY 1, 2, 3
    ORDER BY order_date DESC
    """


def _customer_daily_orders(ref: Ref, source: Ref) -> str:
    return f"""
    WITH date_spine AS (
        SELECT CAST(range AS DATE) AS date_day
        FROM range(DATE '2018-01-01', DATE '2018-04-01', INTERVAL 1 DAY)
    ),
    customer_orders AS (
        SELECT customer_id, order_date, COUNT(order_id) AS daily_order_count
        FROM {ref("stg_jaffle_shop__orders")}
        GROUP BY ALL
    )
    SELECT
        md5(
            COALESCE(CAST(customer_orders.customer_id AS VARCHAR), '_null_')
            || '-' || CAST(date_spine.date_day AS VARCHAR)
        ) AS pkey,
        date_spine.date_day AS order_date,
        customer_orders.customer_id,
        COALESCE(customer_orders.daily_order_count, 0) AS daily_order_count
    FROM date_spine
    LEFT JOIN customer_orders
      ON date_spine.date_day = customer_orders.order_date
    """


MODELS: tuple[ModelDefinition, ...] = (
    ModelDefinition("stg_jaffle_shop__customers", "stg", "view", _stg_customers),
    ModelDefinition("stg_jaffle_shop__orders", "stg", "view", _stg_orders),
    ModelDefinition("stg_stripe__payments", "stg", "view", _stg_payments),
    ModelDefinition("int_orders__pivoted", "int", "view", _int_orders_pivoted),
    ModelDefinition("dim_customers", "mrt", "table", _dim_customers),
    ModelDefinition("fct_orders", "mrt", "table", _fct_orders),
    ModelDefinition("customer_daily_orders", "mrt", "table", _customer_daily_orders),
)


def load_seeds(
    con: duckdb.DuckDBPyConnection,
    seeds: Mapping[str, Sequence[Sequence[Any]]] | None = None,
) -> None:
    con.execute(f"CREATE SCHEMA IF NOT EXISTS {quote_ident(RAW_SCHEMA)}")
    for table, rows in (seeds or SEEDS).items():
        columns = SEED_COLUMNS[table]
        qualified = f"{quote_ident(RAW_SCHEMA)}.{quote_ident(table)}"
        column_sql = ", ".join(f"{quote_ident(name)} {dtype}" for name, dtype in columns)
        con.execute(f"CREATE OR REPLACE TABLE {qualified} ({column_sql})")
        if rows:
            placeholders = ", ".join("?" for _ in columns)
            con.executemany(f"INSERT INTO {qualified} VALUES ({placeholders})", list(rows))
        logger.info("Loaded %d row(s) into %s", len(rows), qualified)


def build_warehouse(
    con: duckdb.DuckDBPyConnection,
    context: ExecutionContext | None = None,
    seeds: Mapping[str, Sequence[Sequence[Any]]] | None = None,
) -> dict[str, str]:
    """Load seeds and build every model; returns model name -> schema."""
    context = context or ExecutionContext()
    load_seeds(con, seeds)
    built: dict[str, str] = {}

    def source(name: str) -> str:
        return f"{quote_ident(RAW_SCHEMA)}.{quote_ident(name)}"

    def ref(name: str) -> str:
        if name not in built:
            raise KeyError(f"Model '{name}' referenced before it was built.")
        return f"{quote_ident(built[name])}.{quote_ident(name)}"

    for model in MODELS:
        schema = generate_schema_name(model.custom_schema, context)
        con.execute(f"CREATE SCHEMA IF NOT EXISTS {quote_ident(schema)}")
        kind = "VIEW" if model.materialized == "view" else "TABLE"
        qualified = f"{quote_ident(schema)}.{quote_ident(model.name)}"
        con.execute(f"CREATE OR REPLACE {kind} {qualified} AS {model.render(ref, source)}")
        built[model.name] = schema
        logger.info("Built %s %s", model.materialized, qualified)
    return built


def clean_stale_models(
    con: duckdb.DuckDBPyConnection,
    context: ExecutionContext | None = None,
    schema: str | None = None,
    dry_run: bool = True,
) -> list[str]:
    """Drop tables and views in ``schema`` that no model in ``MODELS`` builds.

    ``schema`` defaults to the target schema. With ``dry_run`` the DROP
    statements are only logged; either way they are returned.
    """
    context = context or ExecutionContext()
    schema = schema or context.schema
    known = {model.name for model in MODELS}
    rows = con.execute(
        """
        SELECT table_name, table_type
        FROM information_schema.tables
        WHERE table_catalog = current_database()
          AND table_schema = ?
        ORDER BY table_name
        """,
        [schema],
    ).fetchall()
    statements = [
        f"DROP {'VIEW' if table_type == 'VIEW' else 'TABLE'} "
        f"{quote_ident(schema)}.{quote_ident(name)}"
        for name, table_type in rows
        if name not in known
    ]
    for statement in statements:
        if dry_run:
            logger.info("[DRY RUN] %s", statement)
        else:
            logger.info("Dropping stale object: %s", statement)
            con.execute(statement)
    return statements
