# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from typing import Any

from errorprone_plugin.errorprone.options import ErrorProneOptions


class ErrorProneCompilerArgumentProvider:
    """Contributes the Error Prone compiler arguments of a compile task.

    Reads the options each time arguments are requested, so changes made after the task was
    configured (variant conventions, build scripts) are honored.
    """

    name = "errorprone"

    def __init__(self, errorprone_options: ErrorProneOptions) -> None:
        self._errorprone_options = errorprone_options

    @property
    def errorprone_options(self) -> ErrorProneOptions | None:
        """The options when Error Prone is enabled; a disabled model is not part of the inputs."""
        return self._errorprone_options if self._errorprone_options.is_enabled else None

    def nested_inputs(self) -> dict[str, Any] | None:
        options = self.errorprone_options
        return options.as_inputs() if options is not None else None

    def as_arguments(self) -> list[str]:
        argument = self._errorprone_options.to_argument_string()
        if argument is None:
            return []
        return [argument, "-XDcompilePolicy=simple"]
