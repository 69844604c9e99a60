from shopdq.sql_helpers import cents_to_dollars, generate_schema_name
from shopdq.validate.context import ExecutionContext


def test_cents_to_dollars():
    assert cents_to_dollars("amount") == "ROUND(amount/100, 2)"
    assert cents_to_dollars("amount", decimals=0) == "ROUND(amount/100, 0)"


def test_generate_schema_name_uses_custom_schema_in_prod_only():
    prod = ExecutionContext(target_name="prod", schema="analytics")
    dev = ExecutionContext(target_name="dev", schema="dbt_dev")

    assert generate_schema_name(" stg ", prod) == "stg"
    assert generate_schema_name(None, prod) == "analytics"
    assert generate_schema_name("stg", dev) == "dbt_dev"
