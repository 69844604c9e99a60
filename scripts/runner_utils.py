"""Shared helpers for the shopdq command-line scripts."""

from __future__ import annotations

import argparse
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import duckdb

from shopdq.jaffle.build import build_warehouse
from shopdq.validate.context import ExecutionContext, load_context
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.paths import PROFILES_PATH, RULES_PATH


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--duckdb-path",
        type=Path,
        help="DuckDB file holding the built models.",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Build the jaffle_shop demo warehouse in memory instead of opening a file.",
    )
    parser.add_argument("--target", default="dev", help="Profile target (dev, ci, prod).")
    parser.add_argument("--profiles-path", type=Path, default=PROFILES_PATH)
    parser.add_argument("--rules-path", type=Path, default=RULES_PATH)
    parser.add_argument(
        "--model",
        action="append",
        dest="models",
        help="Restrict the run to this model (repeatable).",
    )
    parser.add_argument("--run-id", help="Optional override for the run identifier.")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(message)s")


def resolve_context(args: argparse.Namespace) -> ExecutionContext:
    try:
        return load_context(args.target, args.profiles_path)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc


def resolve_run_id(args: argparse.Namespace) -> str:
    if args.run_id:
        return args.run_id
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    return f"{stamp}-{uuid.uuid4().hex[:8]}"


@contextmanager
def open_connection(
    args: argparse.Namespace, context: ExecutionContext
) -> Iterator[duckdb.DuckDBPyConnection]:
    if args.demo:
        with duckdb.connect(":memory:") as con:
            build_warehouse(con, context)
            yield con
        return
    if not args.duckdb_path:
        raise SystemExit("Provide --duckdb-path or --demo.")
    if not args.duckdb_path.exists():
        raise SystemExit(f"DuckDB file missing at {args.duckdb_path}")
    with duckdb.connect(str(args.duckdb_path)) as con:
        yield con
