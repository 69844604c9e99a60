from shopdq.validate.config import ValidationRule, load_rules
from shopdq.validate.models import RuleSpec
from shopdq.validate.paths import RULES_PATH
from shopdq.validate.quality_checks import run_quality_checks
from shopdq.validate.rule_engine import RuleEngine

from scripts.run_quality_checks import failing_models
from scripts.validate_runner import blocking_failures, run_validations


def test_packaged_rules_against_demo_warehouse(executor, context, warehouse):
    suite = load_rules(RULES_PATH)

    results = run_validations(RuleEngine(executor, context=context), list(suite.validations))

    failed = {rule.id: len(failures) for rule, failures in results if not failures.passed}
    assert failed == {"payments_amount_positive": 1}
    assert blocking_failures(results) == []


def test_error_severity_failures_block(executor, context, warehouse):
    rules = [
        ValidationRule("fct_orders_amount_not_null", "fct_orders", RuleSpec("not_null", "amount"), "error"),
        ValidationRule("payments_amount_positive", "stg_stripe__payments", RuleSpec("positive", "amount"), "warn"),
        ValidationRule("fct_orders_order_id_not_null", "fct_orders", RuleSpec("not_null", "order_id"), "error"),
    ]

    results = run_validations(RuleEngine(executor, context=context), rules)

    assert blocking_failures(results) == ["fct_orders_amount_not_null (fct_orders: 1 row(s))"]


def test_failing_models_lists_only_summaries_with_errors(executor, context, warehouse):
    orders = run_quality_checks(
        "fct_orders", {"null_check_columns": ["amount"]}, executor, context
    )
    customers = run_quality_checks(
        "dim_customers", {"null_check_columns": ["customer_id"]}, executor, context
    )

    assert failing_models([orders, customers]) == ["fct_orders"]
    assert failing_models([customers]) == []
