"""Catalog of validation rules and the SQL each one generates.

Every rule maps a relation (plus an optional column and rule-specific options)
to a query whose rows are the violations. Each failing row carries the
offending value(s) and a ``validation_error`` message so the result can be
debugged without re-querying. An empty result means the rule passed.

Rules are registered in ``RULES``; adding one means writing a builder and a
single ``RuleDefinition`` entry.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from shopdq.validate.constants import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_MIN_DATE,
    TODAY_ALIASES,
    VALIDATION_ERROR_COLUMN,
)
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.models import Relation, RuleSpec
from shopdq.validate.query_utils import quote_ident, quote_literal, sql_value

TODAY = "current_date"


@dataclass(frozen=True)
class RuleTarget:
    relation: Relation
    column: str | None
    options: Mapping[str, Any]
    today: date
    resolve: Callable[[str], Relation] | None = None

    @property
    def ident(self) -> str:
        return quote_ident(self.column or "")

    def date_literal(self, value: Any) -> str:
        return sql_value(self.today if value == TODAY else value)


Builder = Callable[[RuleTarget], str]


@dataclass(frozen=True)
class RuleDefinition:
    tag: str
    builder: Builder
    column_required: bool = True
    required: tuple[str, ...] = ()
    optional: Mapping[str, Any] = field(default_factory=dict)

    @property
    def allowed_keys(self) -> set[str]:
        return {*self.required, *self.optional, "error_message"}

    def resolve_options(self, rule: RuleSpec) -> dict[str, Any]:
        """Check the rule against this definition and merge in defaults."""
        if self.column_required and not rule.column:
            raise ConfigurationError(
                f"column_name is required for '{self.tag}' validation"
            )
        config = dict(rule.config or {})
        unexpected = sorted(set(config) - self.allowed_keys)
        if unexpected:
            raise ConfigurationError(
                f"Unsupported config for '{self.tag}' validation: {', '.join(unexpected)}. "
                f"Allowed keys are: {', '.join(sorted(self.allowed_keys))}"
            )
        for key in self.required:
            if config.get(key) in (None, "", [], ()):
                raise ConfigurationError(
                    f"{key} must be specified in config for '{self.tag}' validation"
                )
        options = dict(self.optional)
        options.update(config)
        options.setdefault("error_message", None)
        for key, value in list(options.items()):
            coerce = _COERCERS.get(key)
            if coerce is not None and value is not None:
                options[key] = coerce(self.tag, key, value)
        _check_bounds(self.tag, options, "min_rows", "max_rows")
        _check_bounds(self.tag, options, "min_date", "max_date")
        return options


def _check_bounds(tag: str, options: Mapping[str, Any], low_key: str, high_key: str) -> None:
    low, high = options.get(low_key), options.get(high_key)
    if low is None or high is None or TODAY in (low, high):
        return
    if low > high:
        raise ConfigurationError(
            f"{low_key} ({low}) must not be greater than {high_key} ({high}) "
            f"for '{tag}' validation"
        )


def _as_bool(tag: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigurationError(f"{key} must be true or false for '{tag}' validation")


def _as_text(tag: str, key: str, value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise ConfigurationError(f"{key} must be a non-empty string for '{tag}' validation")


def _as_row_bound(tag: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(
            f"{key} must be a non-negative integer for '{tag}' validation"
        )
    return value


def _as_values(tag: str, key: str, value: Any) -> tuple[Any, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{key} must be a list for '{tag}' validation")
    if not value:
        raise ConfigurationError(
            f"{key} list must be specified in config for '{tag}' validation"
        )
    for item in value:
        if item is None:
            raise ConfigurationError(
                f"{key} must not contain null for '{tag}' validation; use allow_nulls instead"
            )
        if isinstance(item, float) and not math.isfinite(item):
            raise ConfigurationError(
                f"{key} must contain finite numbers for '{tag}' validation (got {item})"
            )
    return tuple(value)


def _as_date(tag: str, key: str, value: Any) -> date | str:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.lower() in TODAY_ALIASES:
        return TODAY
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as exc:
        raise ConfigurationError(
            f"{key} '{text}' is not a valid date for '{tag}' validation"
        ) from exc


_COERCERS: dict[str, Callable[[str, str, Any], Any]] = {
    "allow_nulls": _as_bool,
    "values": _as_values,
    "min_date": _as_date,
    "max_date": _as_date,
    "min_rows": _as_row_bound,
    "max_rows": _as_row_bound,
    "parent_model": _as_text,
    "parent_column": _as_text,
    "validation_sql": _as_text,
    "expression": _as_text,
    "condition": _as_text,
    "error_message": _as_text,
}


def _message(target: RuleTarget, detail_sql: str) -> str:
    prefix = target.options.get("error_message")
    if prefix:
        return f"{quote_literal(prefix + ': ')} || {detail_sql}"
    return detail_sql


def _as_text_sql(expression: str) -> str:
    return f"COALESCE(CAST({expression} AS VARCHAR), 'NULL')"


def _null_guard(target: RuleTarget) -> str:
    if target.options.get("allow_nulls"):
        return ""
    return f"\n   OR {target.ident} IS NULL"


def _null_message(target: RuleTarget) -> str:
    return quote_literal(f"NULL value found in column {target.column}")


def build_not_null(target: RuleTarget) -> str:
    return f"""
SELECT *, {_message(target, _null_message(target))} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE {target.ident} IS NULL
"""


def build_unique(target: RuleTarget) -> str:
    col = target.ident
    detail = f"{quote_literal('Duplicate value found: ')} || {_as_text_sql(col)}"
    where = "" if target.options.get("allow_nulls") else f"\nWHERE {col} IS NOT NULL"
    return f"""
SELECT {col}, COUNT(*) AS duplicate_count, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}{where}
GROUP BY {col}
HAVING COUNT(*) > 1
ORDER BY {col} NULLS LAST
"""


def _sign_rule(target: RuleTarget, predicate: str, label: str) -> str:
    col = target.ident
    detail = (
        f"CASE WHEN {col} IS NULL THEN {_null_message(target)} "
        f"ELSE {quote_literal(f'{label} value found in {target.column}: ')} || CAST({col} AS VARCHAR) END"
    )
    return f"""
SELECT *, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE {col} {predicate}{_null_guard(target)}
"""


def build_positive(target: RuleTarget) -> str:
    return _sign_rule(target, "<= 0", "Non-positive")


def build_non_negative(target: RuleTarget) -> str:
    return _sign_rule(target, "< 0", "Negative")


def build_date_range(target: RuleTarget) -> str:
    col = target.ident
    minimum = target.date_literal(target.options["min_date"])
    maximum = target.date_literal(target.options["max_date"])
    detail = (
        f"CASE WHEN {col} IS NULL THEN {quote_literal(f'NULL date found in {target.column}')} "
        f"WHEN {col} < {minimum} THEN 'Date before minimum: ' || CAST({col} AS VARCHAR) "
        f"WHEN {col} > {maximum} THEN 'Date after maximum: ' || CAST({col} AS VARCHAR) "
        "ELSE 'Date out of range' END"
    )
    return f"""
SELECT *, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE {col} < {minimum}
   OR {col} > {maximum}{_null_guard(target)}
"""


def build_email_format(target: RuleTarget) -> str:
    col = target.ident
    text = f"CAST({col} AS VARCHAR)"
    detail = f"'Invalid email format: ' || {text}"
    return f"""
SELECT *, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE {col} IS NOT NULL
  AND (
    {text} NOT LIKE '%_@_%.__%'
    OR {text} LIKE '%@%@%'
    OR {text} LIKE '% %'
  )
"""


def build_referential_integrity(target: RuleTarget) -> str:
    col = target.ident
    parent_model = target.options["parent_model"]
    parent_column = quote_ident(target.options.get("parent_column") or target.column or "")
    if target.resolve is not None:
        parent = target.resolve(parent_model)
    else:
        parent = Relation(schema=target.relation.schema, identifier=parent_model)
    detail = (
        f"{quote_literal(f'Referential integrity violation: {target.column} = ')} || "
        f"CAST(child.{col} AS VARCHAR) || {quote_literal(f' not found in {parent_model}')}"
    )
    return f"""
SELECT child.*, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql} AS child
LEFT JOIN {parent.sql} AS parent
  ON child.{col} = parent.{parent_column}
WHERE child.{col} IS NOT NULL
  AND parent.{parent_column} IS NULL
"""


def build_accepted_values(target: RuleTarget) -> str:
    col = target.ident
    values = target.options["values"]
    accepted = ", ".join(str(value) for value in values)
    detail = (
        f"CASE WHEN {col} IS NULL THEN {_null_message(target)} "
        f"ELSE {quote_literal(f'Invalid value in {target.column}: ')} || CAST({col} AS VARCHAR) "
        f"|| {quote_literal(f'. Accepted values are: {accepted}')} END"
    )
    in_list = ", ".join(sql_value(value) for value in values)
    return f"""
SELECT *, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE {col} NOT IN ({in_list}){_null_guard(target)}
"""


def build_custom_sql(target: RuleTarget) -> str:
    message = target.options.get("error_message") or DEFAULT_ERROR_MESSAGE
    return f"""
SELECT *, {quote_literal(message)} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE NOT ({target.options["validation_sql"]})
"""


def build_expression_is_true(target: RuleTarget) -> str:
    expression = target.options["expression"]
    message = target.options.get("error_message") or DEFAULT_ERROR_MESSAGE
    return f"""
SELECT *, {quote_literal(f'{message}: Expression "{expression}" is false')} AS {VALIDATION_ERROR_COLUMN}
FROM {target.relation.sql}
WHERE ({target.options["condition"]})
  AND NOT ({expression})
"""


def build_row_count(target: RuleTarget) -> str:
    min_rows = target.options["min_rows"]
    max_rows = target.options.get("max_rows")
    cases = [
        f"WHEN total_rows < {min_rows} THEN 'Row count below minimum: ' "
        f"|| CAST(total_rows AS VARCHAR) || ' < {min_rows}'"
    ]
    where = f"total_rows < {min_rows}"
    if max_rows is not None:
        cases.append(
            f"WHEN total_rows > {max_rows} THEN 'Row count above maximum: ' "
            f"|| CAST(total_rows AS VARCHAR) || ' > {max_rows}'"
        )
        where += f" OR total_rows > {max_rows}"
    detail = f"CASE {' '.join(cases)} END"
    return f"""
WITH row_count AS (
    SELECT COUNT(*) AS total_rows
    FROM {target.relation.sql}
)
SELECT total_rows, {_message(target, detail)} AS {VALIDATION_ERROR_COLUMN}
FROM row_count
WHERE {where}
"""


RULES: dict[str, RuleDefinition] = {
    definition.tag: definition
    for definition in (
        RuleDefinition("not_null", build_not_null),
        RuleDefinition("unique", build_unique, optional={"allow_nulls": False}),
        RuleDefinition("positive", build_positive, optional={"allow_nulls": False}),
        RuleDefinition("non_negative", build_non_negative, optional={"allow_nulls": False}),
        RuleDefinition(
            "date_range",
            build_date_range,
            optional={"min_date": DEFAULT_MIN_DATE, "max_date": TODAY, "allow_nulls": False},
        ),
        RuleDefinition("email_format", build_email_format),
        RuleDefinition(
            "referential_integrity",
            build_referential_integrity,
            required=("parent_model",),
            optional={"parent_column": None},
        ),
        RuleDefinition(
            "accepted_values",
            build_accepted_values,
            required=("values",),
            optional={"allow_nulls": False},
        ),
        RuleDefinition(
            "custom_sql",
            build_custom_sql,
            column_required=False,
            required=("validation_sql",),
        ),
        RuleDefinition(
            "expression_is_true",
            build_expression_is_true,
            column_required=False,
            required=("expression",),
            optional={"condition": "true"},
        ),
        RuleDefinition(
            "row_count",
            build_row_count,
            column_required=False,
            optional={"min_rows": 1, "max_rows": None},
        ),
    )
}


def get_definition(tag: str) -> RuleDefinition:
    definition = RULES.get(tag)
    if definition is None:
        raise ConfigurationError(
            f"Unknown validation type: '{tag}'. Valid types are: {', '.join(RULES)}"
        )
    return definition
