"""Build and run single validation rules against DuckDB relations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from shopdq.validate.context import ExecutionContext
from shopdq.validate.models import FailureSet, QuerySpec, Relation, RuleSpec
from shopdq.validate.query_utils import QueryExecutor
from shopdq.validate.relations import RelationResolver
from shopdq.validate.rule_catalog import RuleTarget, get_definition

logger = logging.getLogger(__name__)


def build_query(
    rule: RuleSpec,
    relation: Relation | str,
    resolve: Callable[[str], Relation] | None = None,
    context: ExecutionContext | None = None,
) -> QuerySpec:
    """Translate ``rule`` into the query that selects its violating rows.

    The rule's configuration is checked before the relation is looked at, so
    a missing column or option raises ``ConfigurationError`` without any
    catalog lookup or query being issued. ``relation`` may be a resolved
    ``Relation`` or a name, in which case ``resolve`` is required.
    """
    definition = get_definition(rule.tag)
    options = definition.resolve_options(rule)
    if not isinstance(relation, Relation):
        if resolve is None:
            raise TypeError("A resolver is required to build a query from a relation name.")
        relation = resolve(relation)
    context = context or ExecutionContext()
    target = RuleTarget(
        relation=relation,
        column=rule.column,
        options=options,
        today=context.today,
        resolve=resolve,
    )
    return QuerySpec(
        tag=rule.tag,
        relation=relation.name,
        column=rule.column,
        sql=definition.builder(target).strip(),
    )


class RuleEngine:
    def __init__(
        self,
        executor: QueryExecutor,
        resolver: RelationResolver | None = None,
        context: ExecutionContext | None = None,
    ) -> None:
        self._executor = executor
        self._resolver = resolver or RelationResolver(executor)
        self._context = context or ExecutionContext()

    def build(self, model: Relation | str, rule: RuleSpec) -> QuerySpec:
        return build_query(rule, model, self._resolver.resolve, self._context)

    def run_rule(self, model: Relation | str, rule: RuleSpec) -> FailureSet:
        query = self.build(model, rule)
        result = self._executor.execute(query.sql)
        failures = FailureSet(
            rule=rule,
            query=query,
            columns=result.columns,
            rows=tuple(result.records()),
        )
        if failures.passed:
            logger.info("%s passed on %s", rule.tag, query.relation)
        else:
            logger.warning(
                "%s failed on %s: %d failing row(s)", rule.tag, query.relation, len(failures)
            )
        return failures

    def run_validation(
        self,
        model: Relation | str,
        rule_tag: str,
        column: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> FailureSet:
        return self.run_rule(model, RuleSpec(tag=rule_tag, column=column, config=dict(config or {})))
