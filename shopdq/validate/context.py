"""Execution context passed explicitly to the engine, aggregator and reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from shopdq.validate.constants import VERBOSE_TARGETS
from shopdq.validate.errors import ConfigurationError
from shopdq.validate.paths import PROFILES_PATH


@dataclass(frozen=True)
class ExecutionContext:
    """Target environment for one run.

    ``verbose`` defaults to True for development and CI targets and False
    elsewhere; ``today`` pins the date used by date-range rules and the
    future-date check.
    """

    target_name: str = "dev"
    schema: str = "main"
    verbose: bool | None = None
    today: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        if self.verbose is None:
            object.__setattr__(self, "verbose", self.target_name in VERBOSE_TARGETS)


def load_context(
    target_name: str, path: Path | None = None, today: date | None = None
) -> ExecutionContext:
    source = path or PROFILES_PATH
    raw: dict[str, Any] = yaml.safe_load(source.read_text()) or {}
    targets = raw.get("targets") or {}
    if target_name not in targets:
        known = ", ".join(sorted(targets)) or "none"
        raise ConfigurationError(
            f"Unknown target '{target_name}' in {source}. Known targets: {known}"
        )
    payload = targets[target_name] or {}
    kwargs: dict[str, Any] = {
        "target_name": target_name,
        "schema": str(payload.get("schema", "main")),
        "verbose": payload.get("verbose"),
    }
    if today is not None:
        kwargs["today"] = today
    return ExecutionContext(**kwargs)
