"""Row and column statistics for a built model."""

from __future__ import annotations

import time

from shopdq.validate.context import ExecutionContext
from shopdq.validate.models import ModelStats, Relation
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.relations import RelationResolver


def collect_model_stats(
    relation: Relation | str,
    executor: QueryExecutor,
    context: ExecutionContext | None = None,
    row_threshold: int = 1000,
    resolver: RelationResolver | None = None,
) -> ModelStats:
    started = time.perf_counter()
    context = context or ExecutionContext()
    relation = (resolver or RelationResolver(executor)).resolve(relation)
    row_count = int(executor.scalar(f"SELECT COUNT(*) AS row_count FROM {relation.sql}"))
    return ModelStats(
        relation=relation,
        environment=context.target_name,
        row_count=row_count,
        row_threshold=row_threshold,
        duration=time.perf_counter() - started,
    )
