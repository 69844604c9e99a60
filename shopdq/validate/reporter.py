"""Render quality-check summaries and model statistics as leveled log lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from shopdq.validate.constants import STATUS_FAIL, STATUS_WARN
from shopdq.validate.models import CheckResult, ModelStats, QualityRunSummary

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"
ERROR = "error"
LEVELS = {INFO: logging.INFO, WARNING: logging.WARNING, ERROR: logging.ERROR}

BOX_WIDTH = 58


@dataclass(frozen=True)
class ReportLine:
    level: str
    message: str


def _boxed(text: str, left: str = "║", right: str = "║") -> str:
    return f"{left}{text.ljust(BOX_WIDTH)}{right}"


def _header(summary: QualityRunSummary) -> list[ReportLine]:
    return [
        ReportLine(INFO, ""),
        ReportLine(INFO, "╔" + "═" * BOX_WIDTH + "╗"),
        ReportLine(INFO, _boxed("DATA QUALITY CHECKS".center(BOX_WIDTH))),
        ReportLine(INFO, "╠" + "═" * BOX_WIDTH + "╣"),
        ReportLine(INFO, _boxed(f" Model: {summary.relation}")),
        ReportLine(INFO, _boxed(f" Environment: {summary.environment}")),
        ReportLine(INFO, "╚" + "═" * BOX_WIDTH + "╝"),
        ReportLine(INFO, ""),
    ]


def _row_count_lines(check: CheckResult) -> list[ReportLine]:
    if check.status == STATUS_FAIL:
        return [ReportLine(ERROR, "✗ Row Count Check: FAILED - 0 rows found")]
    return [ReportLine(INFO, f"✓ Row Count Check: {check.count} rows")]


def _null_lines(check: CheckResult, verbose: bool) -> list[ReportLine]:
    if check.status == STATUS_FAIL:
        return [
            ReportLine(
                ERROR,
                f"  ✗ {check.column}: {check.count} NULLs ({check.percentage:.2f}%) - CRITICAL",
            )
        ]
    if check.status == STATUS_WARN:
        return [
            ReportLine(WARNING, f"  ⚠ {check.column}: {check.count} NULLs ({check.percentage:.2f}%)")
        ]
    return [ReportLine(INFO, f"  ✓ {check.column}: No NULLs found")] if verbose else []


def _duplicate_lines(check: CheckResult, verbose: bool) -> list[ReportLine]:
    lines = []
    if verbose:
        lines += [ReportLine(INFO, ""), ReportLine(INFO, f"Checking for duplicates on: {check.column}")]
    if check.count:
        lines.append(
            ReportLine(WARNING, f"  ✗ Found {check.count} duplicate values in {check.column}")
        )
    elif verbose:
        lines.append(ReportLine(INFO, f"  ✓ No duplicates found on {check.column}"))
    return lines


def _date_range_lines(check: CheckResult, verbose: bool) -> list[ReportLine]:
    lines = []
    if verbose:
        details = check.details
        lines += [
            ReportLine(INFO, ""),
            ReportLine(INFO, f"Checking date range for: {check.column}"),
            ReportLine(INFO, f"  ✓ Date Range: {details.get('min_date')} to {details.get('max_date')}"),
            ReportLine(INFO, f"    Span: {details.get('span_days')} days"),
        ]
    if check.count:
        lines.append(
            ReportLine(WARNING, f"  ⚠ Warning: {check.count} records have future dates")
        )
    return lines


def _summary_box(summary: QualityRunSummary) -> list[ReportLine]:
    return [
        ReportLine(INFO, ""),
        ReportLine(INFO, "┌" + "─" * BOX_WIDTH + "┐"),
        ReportLine(INFO, _boxed("SUMMARY".center(BOX_WIDTH), "│", "│")),
        ReportLine(INFO, "├" + "─" * BOX_WIDTH + "┤"),
        ReportLine(INFO, _boxed(f" Total Checks: {summary.total_checks}", "│", "│")),
        ReportLine(INFO, _boxed(f" Passed: {summary.passed_checks}", "│", "│")),
        ReportLine(INFO, _boxed(f" Success Rate: {summary.success_rate:.1f}%", "│", "│")),
        ReportLine(INFO, _boxed(f" Duration: {summary.duration:.3f}s", "│", "│")),
        ReportLine(INFO, "└" + "─" * BOX_WIDTH + "┘"),
    ]


def _itemized(summary: QualityRunSummary) -> list[ReportLine]:
    lines = []
    if summary.warnings:
        lines += [ReportLine(INFO, ""), ReportLine(WARNING, "⚠️  WARNINGS:")]
        lines += [ReportLine(WARNING, f"   • {warning}") for warning in summary.warnings]
    if summary.errors:
        lines += [ReportLine(INFO, ""), ReportLine(ERROR, "❌ ERRORS:")]
        lines += [ReportLine(ERROR, f"   • {error}") for error in summary.errors]
    return lines


def status_line(summary: QualityRunSummary) -> ReportLine:
    if summary.errors:
        return ReportLine(ERROR, "🔴 Data quality checks completed with ERRORS")
    if summary.warnings:
        return ReportLine(WARNING, "🟡 Data quality checks completed with WARNINGS")
    return ReportLine(INFO, "🟢 All data quality checks PASSED")


def render(summary: QualityRunSummary, verbose: bool) -> list[ReportLine]:
    """Format a finalized summary.

    Non-verbose output drops the narration of checks that found nothing, but
    keeps the header, the row-count line, every warning and failure line, the
    summary box, the itemized warnings and errors, and the final status.
    """
    lines = _header(summary)
    null_header_done = False
    for check in summary.checks:
        if check.name == "row_count":
            lines += _row_count_lines(check)
        elif check.name == "null_check":
            if verbose and not null_header_done:
                lines += [
                    ReportLine(INFO, ""),
                    ReportLine(INFO, "Checking for NULL values in key columns..."),
                ]
                null_header_done = True
            lines += _null_lines(check, verbose)
        elif check.name == "duplicate_check":
            lines += _duplicate_lines(check, verbose)
        elif check.name == "date_range":
            lines += _date_range_lines(check, verbose)
    lines += _summary_box(summary)
    lines += _itemized(summary)
    lines += [ReportLine(INFO, ""), status_line(summary), ReportLine(INFO, "")]
    return lines


def render_model_stats(stats: ModelStats) -> list[ReportLine]:
    relation = stats.relation
    lines = [
        ReportLine(INFO, "=" * 60),
        ReportLine(INFO, "MODEL STATISTICS LOGGER"),
        ReportLine(INFO, f"Model: {relation}"),
        ReportLine(INFO, f"Target: {stats.environment}"),
        ReportLine(INFO, f"Schema: {relation.schema}"),
        ReportLine(INFO, "=" * 60),
    ]
    if stats.is_empty:
        lines += [
            ReportLine(WARNING, "⚠️  WARNING: Model has 0 rows!"),
            ReportLine(WARNING, f"Model {relation} is empty"),
        ]
    elif stats.below_threshold:
        lines += [
            ReportLine(WARNING, "⚠️  WARNING: Low row count detected!"),
            ReportLine(
                WARNING, f"   Rows: {stats.row_count} (threshold: {stats.row_threshold})"
            ),
        ]
    else:
        lines.append(ReportLine(INFO, f"✓ Row count: {stats.row_count}"))
    lines += [
        ReportLine(INFO, f"✓ Column count: {stats.column_count}"),
        ReportLine(INFO, f"✓ Estimated size: ~{stats.estimated_size_mb:.2f} MB"),
        ReportLine(INFO, ""),
        ReportLine(INFO, "Columns in model:"),
    ]
    lines += [
        ReportLine(INFO, f"  - {column.name} ({column.dtype})") for column in relation.columns
    ]
    lines += [
        ReportLine(INFO, ""),
        ReportLine(INFO, f"Analysis completed in {stats.duration:.3f} seconds"),
        ReportLine(INFO, "=" * 60),
    ]
    return lines


def emit_report(lines: Iterable[ReportLine], log: logging.Logger | None = None) -> None:
    target = log or logger
    for line in lines:
        target.log(LEVELS.get(line.level, logging.INFO), line.message)
