"""Render quality-check summaries into the static HTML report."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, select_autoescape

from shopdq.validate.paths import TEMPLATE_DIR

STATUS_LABELS = {
    "errors": "completed with ERRORS",
    "warnings": "completed with WARNINGS",
    "passed": "all checks PASSED",
}


def load_summaries(directory: Path) -> list[dict[str, Any]]:
    if not directory.exists():
        return []
    payloads = []
    for path in sorted(directory.glob("*.json")):
        payload = json.loads(path.read_text())
        if "checks" in payload and "relation" in payload:
            payloads.append(payload)
    return payloads


def build_context(summaries: Iterable[dict[str, Any]]) -> dict[str, Any]:
    rows = list(summaries)
    return {
        "summaries": rows,
        "status_labels": STATUS_LABELS,
        "total_errors": sum(len(row.get("errors", [])) for row in rows),
        "total_warnings": sum(len(row.get("warnings", [])) for row in rows),
        "run_id": next((row.get("run_id") for row in rows if row.get("run_id")), None),
    }


def render_quality_report(context: dict[str, Any]) -> str:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "jinja"]),
    )
    template = env.get_template("quality_report.html.jinja")
    return template.render(context)
