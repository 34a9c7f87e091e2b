# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging

import pytest

from errorprone_plugin.base.exceptions import ErrorProneOptionsError
from errorprone_plugin.base.hash_utils import json_hash
from errorprone_plugin.errorprone.options import CheckSeverity, ErrorProneOptions
from errorprone_plugin.option.ranked_value import Rank


class StaticArguments:
    def __init__(self, *args: str) -> None:
        self.args = list(args)

    def as_arguments(self) -> list[str]:
        return self.args


@pytest.fixture
def options() -> ErrorProneOptions:
    options = ErrorProneOptions()
    options.enabled.set(True)
    return options


def test_render_order(options: ErrorProneOptions) -> None:
    options.argument_provider(StaticArguments("-XepOpt:Provided=yes"))
    options.args("-XepPatchChecks:MissingOverride")
    options.option("NullAway:AnnotatedPackages", "net.ltgt")
    options.check("ArrayEquals", CheckSeverity.OFF)
    options.warn("MissingOverride")
    options.excluded_paths.set(".*/build/generated/.*")
    options.is_compiling_test_only_code.set(True)
    options.disable_warnings_in_generated_code.set(True)
    assert options.render() == " ".join(
        [
            "-XepDisableWarningsInGeneratedCode",
            "-XepCompilingTestOnlyCode",
            "-XepExcludedPaths:.*/build/generated/.*",
            "-Xep:ArrayEquals:OFF",
            "-Xep:MissingOverride:WARN",
            "-XepOpt:NullAway:AnnotatedPackages=net.ltgt",
            "-XepPatchChecks:MissingOverride",
            "-XepOpt:Provided=yes",
        ]
    )


def test_all_boolean_flags(options: ErrorProneOptions) -> None:
    for name in ErrorProneOptions.BOOLEAN_OPTIONS:
        getattr(options, name).set(True)
    assert options.render() == " ".join(
        [
            "-XepDisableAllChecks",
            "-XepAllErrorsAsWarnings",
            "-XepAllDisabledChecksAsWarnings",
            "-XepDisableWarningsInGeneratedCode",
            "-XepIgnoreUnknownCheckNames",
            "-XepIgnoreSuppressionAnnotations",
            "-XepCompilingTestOnlyCode",
        ]
    )
    options.disable_all_checks.set(False)
    assert "-XepDisableAllChecks" not in options.render()


def test_checks_keep_first_insertion_order(options: ErrorProneOptions) -> None:
    options.error("A")
    options.disable("B")
    options.warn("A")
    options.enable("C")
    options.check(D="warn", E=CheckSeverity.ERROR)
    assert options.render() == "-Xep:A:WARN -Xep:B:OFF -Xep:C -Xep:D:WARN -Xep:E:ERROR"
    assert list(options.checks) == ["A", "B", "C", "D", "E"]


def test_checks_precede_extra_args(options: ErrorProneOptions) -> None:
    options.args("-XepAllErrorsAsWarnings")
    options.check("ArrayEquals", "OFF")
    assert options.render() == "-Xep:ArrayEquals:OFF -XepAllErrorsAsWarnings"


def test_check_default_severity(options: ErrorProneOptions) -> None:
    options.check("MissingOverride")
    assert options.render() == "-Xep:MissingOverride"


def test_invalid_severity(options: ErrorProneOptions) -> None:
    with pytest.raises(ErrorProneOptionsError, match="Invalid check severity 'INFO'"):
        options.check("ArrayEquals", "INFO")
    with pytest.raises(ErrorProneOptionsError, match="Invalid check severity False"):
        options.check(ArrayEquals=False)
    assert options.checks == {}


def test_boolean_check_options(options: ErrorProneOptions) -> None:
    options.option("Foo:Enabled")
    options.option("Foo:Strict", False)
    options.option("Foo:Level", "3")
    assert options.render() == (
        "-XepOpt:Foo:Enabled=true -XepOpt:Foo:Strict=false -XepOpt:Foo:Level=3"
    )


@pytest.mark.parametrize(
    "configure",
    [
        lambda o: o.args("-Xep:Foo Bar"),
        lambda o: o.args(""),
        lambda o: o.check("Has Space"),
        lambda o: o.option("Foo", "a b"),
        lambda o: o.excluded_paths.set("a\tb"),
        lambda o: o.argument_provider(StaticArguments("-XepOpt:A=1 -XepOpt:B=2")),
    ],
)
def test_whitespace_is_rejected(options: ErrorProneOptions, configure) -> None:
    configure(options)
    with pytest.raises(ErrorProneOptionsError, match="cannot contain whitespace"):
        options.render()


def test_argument_string(options: ErrorProneOptions) -> None:
    assert options.to_argument_string() == "-Xplugin:ErrorProne "
    options.disable("ArrayEquals")
    assert options.to_argument_string() == "-Xplugin:ErrorProne -Xep:ArrayEquals:OFF"
    assert str(options) == "-Xep:ArrayEquals:OFF"
    options.enabled.set(False)
    assert options.to_argument_string() is None


def test_unset_enabled_renders_disabled() -> None:
    options = ErrorProneOptions()
    options.disable("ArrayEquals")
    assert not options.enabled.is_present
    assert options.to_argument_string() is None


def test_convention_is_overridden_by_explicit_set() -> None:
    options = ErrorProneOptions()
    assert options.enabled.by_convention(True)
    assert options.is_enabled
    options.enabled.set(False)
    assert not options.enabled.by_convention(True)
    assert not options.is_enabled
    assert options.enabled.rank is Rank.EXPLICIT


def test_configure_ranks_between_convention_and_explicit(caplog) -> None:
    logger_name = "errorprone_plugin.errorprone.options"
    caplog.set_level(logging.DEBUG, logger=logger_name)
    options = ErrorProneOptions()
    options.enabled.by_convention(True)
    options.is_compiling_test_only_code.set(False)
    options.configure(
        {
            "enabled": False,
            "is_compiling_test_only_code": True,
            "excluded_paths": ".*/generated/.*",
            "checks": {"ArrayEquals": "off"},
            "check_options": {"Foo:Bar": True},
            "args": ["-XepAllErrorsAsWarnings"],
        },
        "errorprone.toml",
    )
    assert options.enabled.get() is False
    assert options.enabled.rank is Rank.CONFIG
    assert options.enabled.details == "errorprone.toml"
    assert [r.getMessage() for r in caplog.records if r.name == logger_name] == [
        "Applying args, check_options, checks, enabled, excluded_paths, "
        "is_compiling_test_only_code from errorprone.toml"
    ]
    assert options.is_compiling_test_only_code.get() is False
    assert options.enabled.by_convention(True) is False
    options.enabled.set(True)
    assert options.render() == (
        "-XepExcludedPaths:.*/generated/.* -Xep:ArrayEquals:OFF -XepOpt:Foo:Bar=true "
        "-XepAllErrorsAsWarnings"
    )


def test_inputs_follow_check_order(options: ErrorProneOptions) -> None:
    other = ErrorProneOptions()
    other.enabled.set(True)
    options.check(A="OFF", B="WARN")
    other.check(B="WARN", A="OFF")
    assert options.as_inputs()["checks"] == {"A": CheckSeverity.OFF, "B": CheckSeverity.WARN}
    assert json_hash(options) != json_hash(other)
    other.checks = {"A": CheckSeverity.OFF, "B": CheckSeverity.WARN}
    assert json_hash(options) == json_hash(other)
