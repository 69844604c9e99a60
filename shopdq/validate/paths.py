"""Path helpers for configuration and exported results."""

from __future__ import annotations

from pathlib import Path


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
CONFIG_BASE = PACKAGE_ROOT / "config"
RULES_PATH = CONFIG_BASE / "rules.yml"
PROFILES_PATH = CONFIG_BASE / "profiles.yml"
TEMPLATE_DIR = PACKAGE_ROOT / "templates"

REPO_ROOT = PACKAGE_ROOT.parent
DATA_MARTS_BASE = REPO_ROOT / "data" / "marts"
REPORTS_BASE = REPO_ROOT / "reports"
