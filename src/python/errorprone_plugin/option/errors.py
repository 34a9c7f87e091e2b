# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from errorprone_plugin.base.exceptions import BuildConfigurationError


class ConfigError(BuildConfigurationError):
    """An error reading or interpreting a config file."""


class ConfigValidationError(ConfigError):
    """A config file contains sections or options that nothing consumes."""


class InterpolationMissingOptionError(ConfigError):
    """A `%(name)s` reference names a value that is not defined."""

    def __init__(self, path: str, section: str, option: str, reference: str) -> None:
        super().__init__(
            f"Failed to interpolate `%({reference})s` in [{section}].{option} of {path}: "
            f"`{reference}` is not defined in the [DEFAULT] section, the [{section}] section, or "
            "the seed values."
        )
