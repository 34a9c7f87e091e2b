# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Error Prone settings read from config files.

    [errorprone]
    disable_warnings_in_generated_code = true
    checks = { MissingOverride = "ERROR" }

    [errorprone.tasks.compileTestJava]
    checks = { ArrayEquals = "OFF" }

    [dependencies]
    errorprone = ["com.google.errorprone:error_prone_core:2.3.2"]
    errorproneJavac = ["com.google.errorprone:javac:9+181-r4173-1"]

Values apply to every compile task, then per task, and only win over conventions: a build script
setting a value explicitly always has the last word.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from errorprone_plugin.base.exceptions import BuildConfigurationError
from errorprone_plugin.build.java_compile import JavaCompile
from errorprone_plugin.errorprone.options import ErrorProneOptions
from errorprone_plugin.errorprone.plugin import ErrorPronePlugin, errorprone_options
from errorprone_plugin.option.config import Config
from errorprone_plugin.option.errors import ConfigValidationError

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project

logger = logging.getLogger(__name__)

ERRORPRONE_SECTION = "errorprone"
TASKS_SECTION = f"{ERRORPRONE_SECTION}.tasks"
DEPENDENCIES_SECTION = "dependencies"

_MAPPING_OPTIONS = ("checks", "check_options")

# The value type of each option, the member type of its entries if a table or list, and how
# to describe them in errors.
_OPTION_TYPES: dict[str, tuple[type, tuple[type, ...] | None, str]] = {
    **{name: (bool, None, "a boolean") for name in ErrorProneOptions.BOOLEAN_OPTIONS},
    "excluded_paths": (str, None, "a string"),
    "checks": (dict, (str,), "a table of check names to severity strings"),
    "check_options": (dict, (str, bool), "a table of check option names to strings or booleans"),
    "args": (list, (str,), "a list of strings"),
}

ERRORPRONE_OPTIONS = {
    *ErrorProneOptions.BOOLEAN_OPTIONS,
    "excluded_paths",
    *_MAPPING_OPTIONS,
    "args",
}

VALID_SECTIONS = {
    ERRORPRONE_SECTION: ERRORPRONE_OPTIONS,
    f"{TASKS_SECTION}.*": ERRORPRONE_OPTIONS,
    DEPENDENCIES_SECTION: {
        ErrorPronePlugin.CONFIGURATION_NAME,
        ErrorPronePlugin.JAVAC_CONFIGURATION_NAME,
    },
}


def _check_types(config: Config, section: str, name: str) -> None:
    value_type, member_types, description = _OPTION_TYPES[name]
    for config_values in config.values:
        value = config_values.get_value(section, name)
        if value is None:
            continue
        members = value.values() if isinstance(value, dict) else value
        if not isinstance(value, value_type) or (
            member_types is not None and not all(isinstance(m, member_types) for m in members)
        ):
            raise ConfigValidationError(
                f"[{section}].{name} in {config_values.path} must be {description}, "
                f"got {value!r}."
            )


def _section_values(config: Config, section: str) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in ERRORPRONE_OPTIONS:
        _check_types(config, section, name)
        if name in _MAPPING_OPTIONS:
            # Merged across files, later files overriding single entries.
            merged: dict[str, Any] = {}
            for value in config.get(section, name):
                merged.update(value)
            if merged:
                values[name] = merged
        else:
            value = config.get_value(section, name)
            if value is not None:
                values[name] = value
    return values


def apply_settings(project: Project, config: Config) -> None:
    """Applies the config's dependencies and Error Prone options to the project.

    :raises: :class:`errorprone_plugin.base.exceptions.BuildConfigurationError` if the Error Prone
      plugin is not applied to the project.
    """
    if not project.plugins.has_plugin(ErrorPronePlugin.PLUGIN_ID):
        raise BuildConfigurationError(
            f"Error Prone settings require the {ErrorPronePlugin.PLUGIN_ID} plugin to be applied "
            f"to {project}."
        )

    for configuration_name in (
        ErrorPronePlugin.CONFIGURATION_NAME,
        ErrorPronePlugin.JAVAC_CONFIGURATION_NAME,
    ):
        dependencies = config.get_value(DEPENDENCIES_SECTION, configuration_name)
        if dependencies:
            logger.debug(f"Adding {len(dependencies)} dependencies to {configuration_name}")
            project.configurations[configuration_name].add(*dependencies)

    defaults = _section_values(config, ERRORPRONE_SECTION)
    per_task = {
        task_name: _section_values(config, f"{TASKS_SECTION}.{task_name}")
        for task_name in config.subsections(TASKS_SECTION)
    }

    def configure(task: JavaCompile) -> None:
        options = errorprone_options(task)
        options.configure(defaults, f"[{ERRORPRONE_SECTION}]")
        task_values = per_task.get(task.name)
        if task_values is not None:
            options.configure(task_values, f"[{TASKS_SECTION}.{task.name}]")

    project.tasks.configure_each(JavaCompile, configure)

    def check_task_names(p: Project) -> None:
        for task_name in per_task:
            if task_name not in p.tasks:
                logger.warning(
                    f"[{TASKS_SECTION}.{task_name}] in {', '.join(config.sources())} does not "
                    f"match any compile task of {p}."
                )

    project.after_evaluate(check_task_names)
