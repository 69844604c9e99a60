"""SQL snippets shared by the jaffle_shop models."""

from __future__ import annotations

from shopdq.validate.context import ExecutionContext


def cents_to_dollars(amount_col: str, decimals: int = 2) -> str:
    return f"ROUND({amount_col}/100, {decimals})"


def generate_schema_name(custom_schema_name: str | None, context: ExecutionContext) -> str:
    """Schema a model is built into.

    Production builds honour the model's custom schema (stg, int, mrt); every
    other target puts all models in the target's own schema.
    """
    if context.target_name == "prod" and custom_schema_name is not None:
        return custom_schema_name.strip()
    return context.schema
