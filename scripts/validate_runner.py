#!/usr/bin/env python3
"""CLI that runs the configured validation rules against built models."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from scripts.runner_utils import (
    add_common_arguments,
    configure_logging,
    open_connection,
    resolve_context,
    resolve_run_id,
)
from shopdq.validate.config import ValidationRule, load_rules
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.models import FailureSet
from shopdq.validate.output import build_validation_results, persist_dataframe
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.rule_engine import RuleEngine


def run_validations(
    engine: RuleEngine, rules: list[ValidationRule]
) -> list[tuple[ValidationRule, FailureSet]]:
    return [(rule, engine.run_rule(rule.model, rule.spec)) for rule in rules]


def blocking_failures(results: list[tuple[ValidationRule, FailureSet]]) -> list[str]:
    return sorted(
        f"{rule.id} ({rule.model}: {len(failures)} row(s))"
        for rule, failures in results
        if rule.severity == "error" and not failures.passed
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Execute validation rules for the jaffle_shop models."
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Write validation results to data/marts/dq_validation_results.",
    )
    args = parser.parse_args()
    configure_logging()

    context = resolve_context(args)
    try:
        suite = load_rules(args.rules_path)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid rules in {args.rules_path}: {exc}") from exc
    rules = [
        rule for rule in suite.validations if not args.models or rule.model in args.models
    ]
    if not rules:
        raise SystemExit("No validation rules matched the requested models.")

    run_id = resolve_run_id(args)
    with open_connection(args, context) as con:
        engine = RuleEngine(QueryExecutor(con), context=context)
        results = run_validations(engine, rules)

    for rule, failures in results:
        if failures.passed:
            continue
        level = logging.ERROR if rule.severity == "error" else logging.WARNING
        logging.log(level, "%s failed with %d row(s)", rule.id, len(failures))
        for message in failures.messages[:5]:
            logging.log(level, "   • %s", message)

    if args.persist:
        path = persist_dataframe(
            build_validation_results(results, run_id), run_id, "dq_validation_results"
        )
        print(f"Validation results written to {path}")

    failed = blocking_failures(results)
    passed = sum(1 for _, failures in results if failures.passed)
    print(f"Validation complete · run_id={run_id} · passed={passed}/{len(results)}")
    if failed:
        raise SystemExit(f"Blocking validations failed: {', '.join(failed)}")


if __name__ == "__main__":
    main()
