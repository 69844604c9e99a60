#!/usr/bin/env python3
"""Drop tables and views in a target schema that no jaffle_shop model builds."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import duckdb

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shopdq.jaffle.build import clean_stale_models
from shopdq.validate.context import load_context
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.paths import PROFILES_PATH


def main() -> None:
    parser = argparse.ArgumentParser(description="Clean stale objects out of a target schema.")
    parser.add_argument("--duckdb-path", type=Path, required=True, help="DuckDB file to clean.")
    parser.add_argument("--target", default="dev", help="Profile target (dev, ci, prod).")
    parser.add_argument("--profiles-path", type=Path, default=PROFILES_PATH)
    parser.add_argument("--schema", help="Schema to clean; defaults to the target schema.")
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Run the DROP statements instead of only logging them.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        context = load_context(args.target, args.profiles_path)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    if not args.duckdb_path.exists():
        raise SystemExit(f"DuckDB file missing at {args.duckdb_path}")
    with duckdb.connect(str(args.duckdb_path)) as con:
        statements = clean_stale_models(
            con, context, schema=args.schema, dry_run=not args.execute
        )

    action = "Dropped" if args.execute else "Would drop"
    print(f"{action} {len(statements)} stale object(s).")


if __name__ == "__main__":
    main()
