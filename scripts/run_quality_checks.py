#!/usr/bin/env python3
"""Run the quality-check sequence for configured models and log the report."""

from __future__ import annotations

import argparse
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
from shopdq.validate.config import load_rules
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.models import QualityRunSummary
from shopdq.validate.output import build_check_results, persist_dataframe, write_json
from shopdq.validate.paths import REPORTS_BASE
from shopdq.validate.quality_checks import QualityCheckAggregator
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.reporter import emit_report, render


def failing_models(summaries: list[QualityRunSummary]) -> list[str]:
    return [summary.relation for summary in summaries if summary.errors]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run row-count, null, duplicate and date-range checks per model."
    )
    add_common_arguments(parser)
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", default=None)
    verbosity.add_argument("--summary", dest="verbose", action="store_false")
    parser.add_argument(
        "--json-dir",
        type=Path,
        default=REPORTS_BASE / "latest",
        help="Directory that receives one summary JSON per model.",
    )
    parser.add_argument("--persist", action="store_true", help="Write check results to parquet.")
    parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit non-zero when any model finishes with errors.",
    )
    args = parser.parse_args()
    configure_logging()

    context = resolve_context(args)
    verbose = context.verbose if args.verbose is None else args.verbose
    try:
        suite = load_rules(args.rules_path)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid rules in {args.rules_path}: {exc}") from exc
    models = args.models or list(suite.quality_checks)
    missing = [model for model in models if model not in suite.quality_checks]
    if missing:
        raise SystemExit(f"No quality checks configured for: {', '.join(missing)}")

    run_id = resolve_run_id(args)
    summaries = []
    with open_connection(args, context) as con:
        aggregator = QualityCheckAggregator(QueryExecutor(con), context=context)
        for model in models:
            summary = aggregator.run(model, suite.quality_checks[model])
            emit_report(render(summary, verbose))
            write_json(
                {"run_id": run_id, **summary.to_dict()},
                args.json_dir / f"{model}.json",
            )
            summaries.append(summary)

    if args.persist:
        path = persist_dataframe(build_check_results(summaries, run_id), run_id, "dq_check_results")
        print(f"Check results written to {path}")

    failing = failing_models(summaries)
    print(f"Quality checks complete · run_id={run_id} · models={len(summaries)}")
    if failing and args.fail_on_error:
        raise SystemExit(f"Quality checks reported errors for: {', '.join(failing)}")


if __name__ == "__main__":
    main()
