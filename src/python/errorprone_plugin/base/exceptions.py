# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations


class ErrorPronePluginException(Exception):
    """Base exception type for the Error Prone plugin and its build model."""


class BuildConfigurationError(ErrorPronePluginException):
    """Indicates an error while configuring a project, before any task executes."""


class UnsupportedHostVersionError(BuildConfigurationError):
    """Indicates a plugin was applied to a build model older than it supports."""

    def __init__(self, plugin_id: str, minimum_version, actual_version) -> None:
        super().__init__(
            f"{plugin_id} requires at least build model version {minimum_version}, "
            f"but was applied to version {actual_version}"
        )
        self.plugin_id = plugin_id
        self.minimum_version = minimum_version
        self.actual_version = actual_version


class UnknownPluginError(BuildConfigurationError):
    """Indicates a plugin id with no registered implementation."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(f"Plugin with id '{plugin_id}' not found.")
        self.plugin_id = plugin_id


class ConfigurationResolutionError(ErrorPronePluginException):
    """Indicates a dependency configuration could not be resolved to a classpath."""


class ErrorProneOptionsError(ErrorPronePluginException):
    """Indicates Error Prone options that cannot be rendered to a compiler argument."""


class TaskError(ErrorPronePluginException):
    """Indicates a task has failed.

    :param int exit_code: the exit code of the failed compiler process, if any.
    :param str output: the compiler output, verbatim.
    """

    def __init__(self, *args, exit_code: int = 1, output: str = "", task_name: str | None = None):
        super().__init__(*args)
        self._exit_code = exit_code
        self._output = output
        self._task_name = task_name

    @property
    def exit_code(self) -> int:
        return self._exit_code

    @property
    def output(self) -> str:
        return self._output

    @property
    def task_name(self) -> str | None:
        return self._task_name


class BackendConfigurationError(BuildConfigurationError):
    """Indicates a problem loading the plugins a backend registers."""
