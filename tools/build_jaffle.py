#!/usr/bin/env python3
"""Build the jaffle_shop demo warehouse into a DuckDB file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import duckdb

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shopdq.jaffle.build import build_warehouse
from shopdq.validate.context import load_context
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.paths import PROFILES_PATH


def main() -> None:
    parser = argparse.ArgumentParser(description="Load seeds and build the jaffle_shop models.")
    parser.add_argument(
        "--duckdb-path",
        type=Path,
        default=REPO_ROOT / "data" / "jaffle_shop.duckdb",
        help="DuckDB file to create or overwrite.",
    )
    parser.add_argument("--target", default="dev", help="Profile target (dev, ci, prod).")
    parser.add_argument("--profiles-path", type=Path, default=PROFILES_PATH)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        context = load_context(args.target, args.profiles_path)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    args.duckdb_path.parent.mkdir(parents=True, exist_ok=True)
    with duckdb.connect(str(args.duckdb_path)) as con:
        built = build_warehouse(con, context)

    print(f"Built {len(built)} model(s) into {args.duckdb_path} for target {context.target_name}.")


if __name__ == "__main__":
    main()
