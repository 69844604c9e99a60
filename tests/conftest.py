import sys
from datetime import date
from pathlib import Path

import duckdb
import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shopdq.jaffle.build import build_warehouse
from shopdq.validate.context import ExecutionContext
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.relations import RelationResolver

TODAY = date(2026, 10, 18)


class RecordingExecutor(QueryExecutor):
    def __init__(self, con):
        super().__init__(con)
        self.queries = []

    def execute(self, query, parameters=None):
        self.queries.append(query)
        return super().execute(query, parameters)


@pytest.fixture
def con():
    connection = duckdb.connect(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def context():
    return ExecutionContext(target_name="dev", today=TODAY)


@pytest.fixture
def executor(con):
    return RecordingExecutor(con)


@pytest.fixture
def resolver(executor):
    return RelationResolver(executor)


@pytest.fixture
def warehouse(con, context):
    return build_warehouse(con, context)


@pytest.fixture
def make_table(con):
    def _make(name, columns, rows):
        con.execute(f'CREATE OR REPLACE TABLE "{name}" ({columns})')
        if rows:
            placeholders = ", ".join("?" for _ in rows[0])
            con.executemany(f'INSERT INTO "{name}" VALUES ({placeholders})', rows)
        return name

    return _make
