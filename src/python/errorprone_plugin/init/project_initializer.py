# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from typing import Any, Iterable

from errorprone_plugin.build.project import Project
from errorprone_plugin.errorprone import settings
from errorprone_plugin.errorprone.plugin import ErrorPronePlugin
from errorprone_plugin.init.extension_loader import DEFAULT_BACKENDS, load_backends
from errorprone_plugin.init.logging import initialize_logging
from errorprone_plugin.option.config import Config, SeedValues
from errorprone_plugin.option.errors import ConfigError
from errorprone_plugin.util.logging import LogLevel
from errorprone_plugin.version import HOST_API_VERSION, VERSION

logger = logging.getLogger(__name__)

GLOBAL_SECTION = "GLOBAL"

DEFAULT_PLUGINS = ("java", ErrorPronePlugin.PLUGIN_ID)

VALID_SECTIONS = {
    GLOBAL_SECTION: {"level", "log_levels_by_target", "colors", "backends", "plugins"},
    **settings.VALID_SECTIONS,
}


def _log_level(value: str, where: str) -> LogLevel:
    try:
        return LogLevel(value.lower())
    except ValueError:
        raise ConfigError(
            f"Invalid log level {value!r} for {where}; expected one of "
            f"{', '.join(level.value for level in LogLevel)}."
        )


def initialize_logging_from_config(config: Config) -> None:
    level = _log_level(config.get_value(GLOBAL_SECTION, "level", "info"), "[GLOBAL].level")
    log_levels_by_target = {
        target: _log_level(value, f"[GLOBAL].log_levels_by_target.{target}")
        for target, value in config.get_value(GLOBAL_SECTION, "log_levels_by_target", {}).items()
    }
    initialize_logging(
        level, log_levels_by_target, use_color=config.get_value(GLOBAL_SECTION, "colors")
    )


def initialize_project(
    config_files: Iterable[str] = (),
    *,
    seed_values: SeedValues | None = None,
    **project_kwargs: Any,
) -> Project:
    """Creates a project configured from the given config files.

    Loads and verifies the config, sets up logging, loads the backends, applies the `[GLOBAL]`
    plugins and, when the Error Prone plugin is among them, its settings.

    :param config_files: TOML files, later ones overriding earlier ones.
    :param seed_values: overrides for the `buildroot` and `homedir` interpolation values.
    :param project_kwargs: passed on to `Project`.
    """
    config = Config.load_files(config_files, seed_values=seed_values)
    config.verify(VALID_SECTIONS)
    initialize_logging_from_config(config)
    logger.debug(f"errorprone-plugin {VERSION}, build model API {HOST_API_VERSION}")

    backends = [*DEFAULT_BACKENDS, *config.get_value(GLOBAL_SECTION, "backends", [])]
    project = Project(plugin_registry=load_backends(backends), **project_kwargs)
    plugins = config.get_value(GLOBAL_SECTION, "plugins", list(DEFAULT_PLUGINS))
    logger.debug(f"Applying {', '.join(plugins)} to {project}")
    project.apply(*plugins)
    if project.plugins.has_plugin(ErrorPronePlugin.PLUGIN_ID):
        settings.apply_settings(project, config)
    return project
