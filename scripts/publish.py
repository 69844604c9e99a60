#!/usr/bin/env python3
"""Render the HTML quality report from the latest check summaries."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from shopdq.validate.html_report import build_context, load_summaries, render_quality_report
from shopdq.validate.paths import REPORTS_BASE


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the latest data quality report.")
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=REPORTS_BASE / "latest",
        help="Directory holding the summary JSON files written by run_quality_checks.py.",
    )
    args = parser.parse_args()

    summaries = load_summaries(args.report_dir)
    if not summaries:
        raise SystemExit(f"No quality check summaries found in {args.report_dir}")
    html = render_quality_report(build_context(summaries))
    target = args.report_dir / "index.html"
    target.write_text(html, encoding="utf-8")
    print(f"Quality report rendered to {target} for {len(summaries)} model(s).")


if __name__ == "__main__":
    main()
