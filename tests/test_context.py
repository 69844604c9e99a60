from datetime import date

import pytest

from shopdq.validate.context import ExecutionContext, load_context
from shopdq.validate.errors import ConfigurationError


@pytest.mark.parametrize(
    ("target", "verbose"), [("dev", True), ("ci", True), ("prod", False), ("staging", False)]
)
def test_verbosity_follows_target(target, verbose):
    assert ExecutionContext(target_name=target).verbose is verbose


def test_explicit_verbosity_wins():
    assert ExecutionContext(target_name="prod", verbose=True).verbose is True


def test_load_context_from_profiles(tmp_path):
    profiles = tmp_path / "profiles.yml"
    profiles.write_text(
        "targets:\n"
        "  dev:\n"
        "    schema: dbt_dev\n"
        "  prod:\n"
        "    schema: analytics\n"
        "    verbose: true\n"
    )

    dev = load_context("dev", profiles, today=date(2026, 1, 1))
    prod = load_context("prod", profiles)

    assert (dev.schema, dev.verbose, dev.today) == ("dbt_dev", True, date(2026, 1, 1))
    assert (prod.schema, prod.verbose) == ("analytics", True)


def test_unknown_target_is_a_configuration_error(tmp_path):
    profiles = tmp_path / "profiles.yml"
    profiles.write_text("targets:\n  dev: {}\n")

    with pytest.raises(ConfigurationError, match="Unknown target 'qa'"):
        load_context("qa", profiles)


def test_packaged_profiles_define_standard_targets():
    assert load_context("prod").verbose is False
    assert load_context("ci").verbose is True
