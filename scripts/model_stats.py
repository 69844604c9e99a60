#!/usr/bin/env python3
"""Log row, column and size statistics for built models."""

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
)
from shopdq.validate.config import load_rules
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.model_stats import collect_model_stats
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.reporter import emit_report, render_model_stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Log statistics for built models.")
    add_common_arguments(parser)
    parser.add_argument(
        "--row-threshold",
        type=int,
        help="Override the configured low-row-count threshold.",
    )
    args = parser.parse_args()
    configure_logging()

    context = resolve_context(args)
    try:
        suite = load_rules(args.rules_path)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid rules in {args.rules_path}: {exc}") from exc
    models = args.models or list(suite.model_stats)
    if not models:
        raise SystemExit("No models requested and none configured under model_stats.")

    with open_connection(args, context) as con:
        executor = QueryExecutor(con)
        for model in models:
            threshold = (
                args.row_threshold
                if args.row_threshold is not None
                else suite.model_stats.get(model, 1000)
            )
            stats = collect_model_stats(model, executor, context, row_threshold=threshold)
            emit_report(render_model_stats(stats))


if __name__ == "__main__":
    main()
