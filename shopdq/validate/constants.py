"""Shared constants for validation rules and quality checks."""

from __future__ import annotations

from datetime import date

DEFAULT_ERROR_MESSAGE = "Validation failed"
DEFAULT_MIN_DATE = date(1900, 1, 1)
TODAY_ALIASES = ("current_date", "today", "now")

NULL_FAIL_PERCENTAGE = 5.0
VERBOSE_TARGETS = ("dev", "ci")
SEVERITIES = ("error", "warn")

EMPTY_TABLE_ERROR = "Empty table - 0 rows"
VALIDATION_ERROR_COLUMN = "validation_error"

STATUS_PASS = "pass"
STATUS_WARN = "warn"
STATUS_FAIL = "fail"
