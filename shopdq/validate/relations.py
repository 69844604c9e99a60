"""Resolve logical model names to DuckDB relations."""

from __future__ import annotations

from shopdq.validate.errors import RelationNotFoundError
from shopdq.validate.models import Column, Relation
from shopdq.validate.query_utils import QueryExecutor


class RelationResolver:
    def __init__(self, executor: QueryExecutor, schemas: list[str] | None = None) -> None:
        self._executor = executor
        self._schemas = schemas

    def resolve(self, name: str | Relation) -> Relation:
        if isinstance(name, Relation):
            return name
        schema, _, identifier = name.rpartition(".")
        schemas = [schema] if schema else self._search_path()
        for candidate in schemas:
            columns = self._columns(candidate, identifier)
            if columns:
                return Relation(schema=candidate, identifier=identifier, columns=columns)
        raise RelationNotFoundError(f"Missing relation for '{name}'.")

    def _search_path(self) -> list[str]:
        if self._schemas:
            return list(self._schemas)
        result = self._executor.execute(
            """
            SELECT DISTINCT table_schema
            FROM information_schema.tables
            WHERE table_catalog = current_database()
            ORDER BY table_schema
            """
        )
        found = [str(value) for value in result.column(0)]
        return ["main", *[schema for schema in found if schema != "main"]]

    def _columns(self, schema: str, identifier: str) -> tuple[Column, ...]:
        result = self._executor.execute(
            """
            SELECT column_name, data_type
            FROM information_schema.columns
            WHERE table_schema = ?
              AND table_name = ?
            ORDER BY ordinal_position
            """,
            [schema, identifier],
        )
        return tuple(Column(name=str(name), dtype=str(dtype)) for name, dtype in result.rows)
