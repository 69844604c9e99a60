"""DuckDB execution helpers shared by the rule engine and quality checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Sequence

import duckdb

logger = logging.getLogger(__name__)


def quote_ident(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def sql_value(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, datetime):
        return f"TIMESTAMP {quote_literal(value.isoformat(sep=' '))}"
    if isinstance(value, date):
        return f"DATE {quote_literal(value.isoformat())}"
    return quote_literal(str(value))


def stringify_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class TabularResult:
    columns: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...]

    def column(self, index: int) -> list[Any]:
        return [row[index] for row in self.rows]

    def value(self, column: int = 0, row: int = 0) -> Any:
        return self.rows[row][column]

    def records(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class QueryExecutor:
    def __init__(self, con: duckdb.DuckDBPyConnection) -> None:
        self._con = con

    def execute(self, query: str, parameters: Sequence[Any] | None = None) -> TabularResult:
        logger.debug("Executing query: %s", " ".join(query.split()))
        cursor = self._con.execute(query, parameters) if parameters else self._con.execute(query)
        columns = tuple(desc[0] for desc in cursor.description) if cursor.description else ()
        return TabularResult(columns=columns, rows=tuple(cursor.fetchall()))

    def scalar(self, query: str, parameters: Sequence[Any] | None = None) -> Any:
        result = self.execute(query, parameters)
        return result.value() if result.rows else None
