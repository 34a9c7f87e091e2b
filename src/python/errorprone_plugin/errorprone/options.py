# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, Mapping

from errorprone_plugin.base.exceptions import ErrorProneOptionsError
from errorprone_plugin.build.java_compile import CommandLineArgumentProvider
from errorprone_plugin.build.property import Property

logger = logging.getLogger(__name__)


class CheckSeverity(Enum):
    """The severity of an Error Prone check; `DEFAULT` re-enables it at its default severity."""

    DEFAULT = "DEFAULT"
    OFF = "OFF"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: CheckSeverity | str) -> CheckSeverity:
        if isinstance(value, CheckSeverity):
            return value
        if not isinstance(value, str) or value.upper() not in cls.__members__:
            raise ErrorProneOptionsError(
                f"Invalid check severity {value!r}; expected one of "
                f"{', '.join(s.value for s in cls)}."
            )
        return cls[value.upper()]


class ErrorProneOptions:
    """The Error Prone configuration of a single Java compile task.

    Reachable as the `errorprone` extension of the task's compile options. Every field may be
    changed until the task executes, at which point the options are rendered to a single compiler
    argument.
    """

    NAME = "errorprone"

    # Boolean properties and the flag each renders to when true, in rendering order.
    _FLAGS = (
        ("disable_all_checks", "-XepDisableAllChecks"),
        ("all_errors_as_warnings", "-XepAllErrorsAsWarnings"),
        ("all_disabled_checks_as_warnings", "-XepAllDisabledChecksAsWarnings"),
        ("disable_warnings_in_generated_code", "-XepDisableWarningsInGeneratedCode"),
        ("ignore_unknown_check_names", "-XepIgnoreUnknownCheckNames"),
        ("ignore_suppression_annotations", "-XepIgnoreSuppressionAnnotations"),
        ("is_compiling_test_only_code", "-XepCompilingTestOnlyCode"),
    )

    BOOLEAN_OPTIONS = ("enabled", *(name for name, _ in _FLAGS))

    def __init__(self) -> None:
        self.enabled: Property[bool] = Property("enabled")
        self.disable_all_checks: Property[bool] = Property("disable_all_checks")
        self.all_errors_as_warnings: Property[bool] = Property("all_errors_as_warnings")
        self.all_disabled_checks_as_warnings: Property[bool] = Property(
            "all_disabled_checks_as_warnings"
        )
        self.disable_warnings_in_generated_code: Property[bool] = Property(
            "disable_warnings_in_generated_code"
        )
        self.ignore_unknown_check_names: Property[bool] = Property("ignore_unknown_check_names")
        self.ignore_suppression_annotations: Property[bool] = Property(
            "ignore_suppression_annotations"
        )
        self.is_compiling_test_only_code: Property[bool] = Property("is_compiling_test_only_code")
        self.excluded_paths: Property[str] = Property("excluded_paths")
        self.checks: dict[str, CheckSeverity] = {}
        self.check_options: dict[str, str] = {}
        self.errorprone_args: list[str] = []
        self.errorprone_argument_providers: list[CommandLineArgumentProvider] = []

    @property
    def is_enabled(self) -> bool:
        return self.enabled.get_or_else(False)

    def check(
        self,
        name: str | None = None,
        severity: CheckSeverity | str = CheckSeverity.DEFAULT,
        /,
        **checks: CheckSeverity | str,
    ) -> None:
        """Overrides the severity of one check, or of several given as keyword arguments.

        A check keeps the position of its first override when updated.
        """
        if name is not None:
            self.checks[name] = CheckSeverity.parse(severity)
        for check_name, check_severity in checks.items():
            self.checks[check_name] = CheckSeverity.parse(check_severity)

    def enable(self, *names: str) -> None:
        for name in names:
            self.check(name, CheckSeverity.DEFAULT)

    def disable(self, *names: str) -> None:
        for name in names:
            self.check(name, CheckSeverity.OFF)

    def warn(self, *names: str) -> None:
        for name in names:
            self.check(name, CheckSeverity.WARN)

    def error(self, *names: str) -> None:
        for name in names:
            self.check(name, CheckSeverity.ERROR)

    def option(self, name: str, value: str | bool = True) -> None:
        """Sets a check option, rendered as `-XepOpt:name=value`."""
        if isinstance(value, bool):
            value = "true" if value else "false"
        self.check_options[name] = value

    def args(self, *flags: str) -> None:
        self.errorprone_args.extend(flags)

    def argument_provider(self, provider: CommandLineArgumentProvider) -> None:
        self.errorprone_argument_providers.append(provider)

    def _tokens(self) -> Iterator[str]:
        for attr, flag in self._FLAGS:
            if getattr(self, attr).get_or_else(False):
                yield flag
        excluded_paths = self.excluded_paths.get_or_else(None)
        if excluded_paths:
            yield f"-XepExcludedPaths:{excluded_paths}"
        for name, severity in self.checks.items():
            if severity is CheckSeverity.DEFAULT:
                yield f"-Xep:{name}"
            else:
                yield f"-Xep:{name}:{severity.value}"
        for name, value in self.check_options.items():
            yield f"-XepOpt:{name}={value}"
        yield from self.errorprone_args
        for provider in self.errorprone_argument_providers:
            yield from provider.as_arguments()

    def render(self) -> str:
        """Renders the options, without the `-Xplugin:ErrorProne` prefix.

        javac splits the plugin argument on whitespace, so a token containing any cannot be passed
        through and raises `ErrorProneOptionsError`.
        """
        tokens = list(self._tokens())
        for token in tokens:
            if not token or any(c.isspace() for c in token):
                raise ErrorProneOptionsError(
                    f"Error Prone options cannot contain whitespace or be empty: {token!r}"
                )
        return " ".join(tokens)

    def to_argument_string(self) -> str | None:
        """The `-Xplugin:ErrorProne` compiler argument, or None when Error Prone is disabled."""
        if not self.is_enabled:
            return None
        return f"-Xplugin:ErrorProne {self.render()}"

    def as_inputs(self) -> dict[str, Any]:
        return {
            **{name: getattr(self, name).get_or_else(None) for name in self.BOOLEAN_OPTIONS},
            "excluded_paths": self.excluded_paths.get_or_else(None),
            "checks": dict(self.checks),
            "check_options": dict(self.check_options),
            "errorprone_args": list(self.errorprone_args),
            "errorprone_argument_providers": [
                list(provider.as_arguments()) for provider in self.errorprone_argument_providers
            ],
        }

    def configure(self, values: Mapping[str, Any], source: str | None = None) -> None:
        """Applies settings read from a config file, below anything set explicitly."""
        if values:
            logger.debug(f"Applying {', '.join(sorted(values))} from {source or 'config'}")
        for name in (*self.BOOLEAN_OPTIONS, "excluded_paths"):
            if name in values:
                getattr(self, name).set_from_config(values[name], source)
        for name, severity in values.get("checks", {}).items():
            self.check(name, severity)
        for name, value in values.get("check_options", {}).items():
            self.option(name, value)
        self.args(*values.get("args", ()))

    def __str__(self) -> str:
        return self.render()
