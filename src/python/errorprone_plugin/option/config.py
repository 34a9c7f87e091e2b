# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import fnmatch
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

import toml
from typing_extensions import Protocol

from errorprone_plugin.option.errors import (
    ConfigError,
    ConfigValidationError,
    InterpolationMissingOptionError,
)

logger = logging.getLogger(__name__)


# A dict with optional override seed values for buildroot and homedir.
SeedValues = Mapping[str, Any]


class ConfigSource(Protocol):
    """A protocol for the contents of a config file."""

    @property
    def path(self) -> str:
        raise NotImplementedError()

    @property
    def content(self) -> bytes:
        raise NotImplementedError()


@dataclass(frozen=True)
class FileContent:
    path: str
    content: bytes


DEFAULT_SECTION = "DEFAULT"

_INTERPOLATION_RE = re.compile(r"%\((?P<interpolated>[a-zA-Z_0-9.]+)\)s")


def _split(section: str) -> list[str]:
    return section.split(".") if section else []


def _matches(path: list[str], pattern: list[str]) -> bool:
    return len(path) == len(pattern) and all(
        fnmatch.fnmatchcase(segment, glob) for segment, glob in zip(path, pattern)
    )


def _is_container(path: list[str], pattern: list[str]) -> bool:
    return len(path) < len(pattern) and all(
        fnmatch.fnmatchcase(segment, glob) for segment, glob in zip(path, pattern)
    )


@dataclass(frozen=True, eq=False)
class Config:
    """Encapsulates config file loading and access, including support for multiple config files.

    Sections are addressed by dotted paths, so `[errorprone.tasks.compileTestJava]` is the section
    `errorprone.tasks.compileTestJava`. String values support substitution using old-style Python
    format strings: `%(var_name)s` is replaced with the value of `var_name` from the same section,
    the DEFAULT section or the seed values.
    """

    values: tuple[_ConfigValues, ...]

    @classmethod
    def load(
        cls,
        file_contents: Iterable[ConfigSource],
        *,
        seed_values: SeedValues | None = None,
    ) -> Config:
        """Loads config from the given payloads, with later payloads overriding earlier ones."""
        config_values = []
        normalized_seed_values = cls._determine_seed_values(seed_values=seed_values)
        for file_content in file_contents:
            try:
                toml_values = toml.loads(file_content.content.decode())
            except toml.TomlDecodeError as e:
                raise ConfigError(
                    f"Config file {file_content.path} could not be parsed as TOML:\n  {e}"
                )
            config_values.append(
                _ConfigValues(
                    file_content.path,
                    toml_values,
                    {**normalized_seed_values, **toml_values.get(DEFAULT_SECTION, {})},
                )
            )
        return cls(tuple(config_values))

    @classmethod
    def load_files(cls, paths: Iterable[str], *, seed_values: SeedValues | None = None) -> Config:
        def read(path: str) -> FileContent:
            try:
                with open(path, "rb") as fp:
                    return FileContent(path, fp.read())
            except OSError as e:
                raise ConfigError(f"Config file {path} could not be read: {e}")

        return cls.load([read(path) for path in paths], seed_values=seed_values)

    @staticmethod
    def _determine_seed_values(*, seed_values: SeedValues | None = None) -> dict[str, Any]:
        safe_seed_values = seed_values or {}
        return {
            "buildroot": safe_seed_values.get("buildroot", os.getcwd()),
            # Note that expanduser will return the root dir when running with a uid
            # not associated with a user.
            "homedir": safe_seed_values.get("homedir", os.path.expanduser("~")),
        }

    def verify(self, section_to_valid_options: Mapping[str, set[str]]) -> None:
        """Fails if any config file holds a section or option not named in the given mapping.

        Section keys may use `*` as a path component, e.g. `errorprone.tasks.*`.
        """
        error_log = []
        for config_values in self.values:
            error_log.extend(config_values.get_verification_errors(section_to_valid_options))
        if error_log:
            for error in error_log:
                logger.error(error)
            raise ConfigValidationError(
                "Invalid config entries detected. See log for details on which entries to update "
                "or remove."
            )

    def get(self, section: str, option: str) -> list[Any]:
        """Retrieves an option value from each config file in which it appears."""
        available_vals = []
        for vals in self.values:
            val = vals.get_value(section, option)
            if val is not None:
                available_vals.append(val)
        return available_vals

    def get_value(self, section: str, option: str, default: Any = None) -> Any:
        """Retrieves the value from the last config file in which the option appears."""
        available_vals = self.get(section, option)
        return available_vals[-1] if available_vals else default

    def get_source_for_option(self, section: str, option: str) -> str | None:
        """Returns the path of the config file whose value for the option wins, if any."""
        for vals in reversed(self.values):
            if vals.get_value(section, option) is not None:
                return vals.path
        return None

    def subsections(self, section: str) -> list[str]:
        """Returns the names of the tables nested directly under the given section."""
        names: dict[str, None] = {}
        for vals in self.values:
            for name, value in vals.section(section).items():
                if isinstance(value, dict):
                    names[name] = None
        return list(names)

    def sources(self) -> list[str]:
        """Returns the sources of this config as a list of filenames."""
        return [vals.path for vals in self.values]


@dataclass(frozen=True)
class _ConfigValues:
    """The parsed contents of a TOML config file."""

    path: str
    section_to_values: dict[str, Any]
    seed_values: dict[str, Any]

    def section(self, section: str) -> dict[str, Any]:
        current: Any = self.section_to_values
        for name in _split(section):
            current = current.get(name) if isinstance(current, dict) else None
            if current is None:
                return {}
        return current if isinstance(current, dict) else {}

    def _interpolate(self, raw_value: str, *, section: str, option: str, section_values: dict):
        possible_interpolations = {**self.seed_values, **section_values}

        def substitute(match: re.Match) -> str:
            reference = match.group("interpolated")
            if reference not in possible_interpolations:
                raise InterpolationMissingOptionError(self.path, section, option, reference)
            return str(possible_interpolations[reference])

        # It's possible to interpolate with a value that itself has an interpolation.
        value = raw_value
        while _INTERPOLATION_RE.search(value):
            value = _INTERPOLATION_RE.sub(substitute, value)
        return value

    def get_value(self, section: str, option: str) -> Any:
        section_values = self.section(section)
        if option not in section_values:
            return None

        def interpolate(value: Any) -> Any:
            if isinstance(value, str):
                return self._interpolate(
                    value, section=section, option=option, section_values=section_values
                )
            if isinstance(value, list):
                return [interpolate(v) for v in value]
            if isinstance(value, dict):
                return {k: interpolate(v) for k, v in value.items()}
            return value

        return interpolate(section_values[option])

    def _iter_sections(
        self, patterns: list[list[str]]
    ) -> Iterator[tuple[str, dict[str, Any] | None, list[str]]]:
        """Yields (section, values, invalid_option_names), descending into nested sections."""

        def walk(path: list[str], values: dict[str, Any]):
            options = []
            for key, value in values.items():
                child = [*path, key]
                is_section = isinstance(value, dict) and any(
                    _matches(child, p) or _is_container(child, p) for p in patterns
                )
                if is_section:
                    yield from walk(child, value)
                elif not path:
                    yield key, None, []
                else:
                    options.append(key)
            if path:
                yield ".".join(path), values, options

        yield from walk([], self.section_to_values)

    def get_verification_errors(
        self, section_to_valid_options: Mapping[str, set[str]]
    ) -> list[str]:
        patterns = {section: _split(section) for section in section_to_valid_options}
        error_log = []
        for section, values, options in self._iter_sections(list(patterns.values())):
            if section == DEFAULT_SECTION:
                continue
            if values is None:
                error_log.append(f"Invalid section [{section}] in {self.path}")
                continue
            path = _split(section)
            valid_options: set[str] | None = None
            for name, pattern in patterns.items():
                if _matches(path, pattern):
                    valid_options = section_to_valid_options[name]
                    break
            if valid_options is None:
                # A container of nested sections, such as [errorprone.tasks].
                valid_options = set()
            for option in sorted(set(options) - valid_options):
                error_log.append(f"Invalid option '{option}' under [{section}] in {self.path}")
        return error_log
