# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
import subprocess
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

from errorprone_plugin.base.exceptions import (
    BuildConfigurationError,
    ConfigurationResolutionError,
)
from errorprone_plugin.build.coordinate import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileDependency:
    """A dependency on a local file, used as-is."""

    path: str


@dataclass(frozen=True)
class ExcludeRule:
    group: str | None = None
    module: str | None = None

    def excludes(self, coord: Coordinate) -> bool:
        return coord.matches(group=self.group, module=self.module)

    def to_coursier_arg(self) -> str:
        return f"{self.group or '*'}:{self.module or '*'}"


Dependency = Union[Coordinate, FileDependency]


class Resolver(ABC):
    """Resolves coordinates, and their transitive dependencies, to local files."""

    @abstractmethod
    def resolve(
        self, coordinates: Sequence[Coordinate], excludes: Sequence[ExcludeRule]
    ) -> list[str]:
        """Returns the files for the given coordinates, in classpath order.

        Raises ConfigurationResolutionError if an artifact cannot be found.
        """


class LocalRepositoryResolver(Resolver):
    """Finds artifacts in a Maven-layout directory, without transitive resolution."""

    def __init__(self, root: str | None = None) -> None:
        self._root = root or os.path.join(os.path.expanduser("~"), ".m2", "repository")

    @property
    def root(self) -> str:
        return self._root

    def resolve(
        self, coordinates: Sequence[Coordinate], excludes: Sequence[ExcludeRule]
    ) -> list[str]:
        paths = []
        for coord in coordinates:
            path = coord.repository_path(self._root)
            if not os.path.isfile(path):
                raise ConfigurationResolutionError(
                    f"Could not find {coord} in the repository at {self._root} (looked for {path})."
                )
            paths.append(path)
        return paths


class CoursierResolver(Resolver):
    """Resolves coordinates transitively by running `coursier fetch --classpath`."""

    def __init__(self, coursier: str = "cs", repositories: Sequence[str] = ()) -> None:
        self._coursier = coursier
        self._repositories = tuple(repositories)

    def command(
        self, coordinates: Sequence[Coordinate], excludes: Sequence[ExcludeRule]
    ) -> list[str]:
        cmd = [self._coursier, "fetch", "--classpath"]
        for repository in self._repositories:
            cmd.extend(["-r", repository])
        for exclude in excludes:
            cmd.extend(["--exclude", exclude.to_coursier_arg()])
        cmd.extend(coord.to_coord_str() for coord in coordinates)
        return cmd

    def resolve(
        self, coordinates: Sequence[Coordinate], excludes: Sequence[ExcludeRule]
    ) -> list[str]:
        if not coordinates:
            return []
        cmd = self.command(coordinates, excludes)
        logger.debug(f"Resolving with: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False, text=True
            )
        except OSError as e:
            raise ConfigurationResolutionError(f"Failed to launch {self._coursier}: {e}")
        if result.returncode != 0:
            raise ConfigurationResolutionError(
                f"{self._coursier} fetch failed with exit code {result.returncode}:\n"
                f"{result.stderr}"
            )
        classpath = result.stdout.strip()
        return classpath.split(os.pathsep) if classpath else []


class DependencyConfiguration:
    """A named, resolvable bag of dependencies.

    Resolution happens at most once: the first call to `resolve` (or `as_path`) fixes the result
    for the rest of the build, even when called concurrently from several tasks.
    """

    def __init__(
        self,
        name: str,
        resolver: Resolver,
        *,
        description: str = "",
        visible: bool = True,
        can_be_consumed: bool = True,
        can_be_resolved: bool = True,
    ) -> None:
        self.name = name
        self.description = description
        self.visible = visible
        self.can_be_consumed = can_be_consumed
        self.can_be_resolved = can_be_resolved
        self._resolver = resolver
        self._dependencies: list[Dependency] = []
        self._excludes: list[ExcludeRule] = []
        self._extends_from: list[DependencyConfiguration] = []
        self._lock = threading.Lock()
        self._resolved: tuple[str, ...] | None = None

    def _check_mutable(self, what: str) -> None:
        if self._resolved is not None:
            raise BuildConfigurationError(
                f"Cannot change {what} of configuration '{self.name}' after it has been resolved."
            )

    def add(self, *dependencies: Dependency | str) -> None:
        """Adds dependencies, given as coordinates, coordinate strings or files."""
        self._check_mutable("dependencies")
        for dependency in dependencies:
            if isinstance(dependency, str):
                dependency = Coordinate.from_coord_str(dependency)
            self._dependencies.append(dependency)

    def files(self, *paths: str) -> None:
        self.add(*(FileDependency(path) for path in paths))

    def exclude(self, group: str | None = None, module: str | None = None) -> None:
        if group is None and module is None:
            raise ValueError("An exclude rule needs a group, a module or both.")
        self._check_mutable("exclude rules")
        self._excludes.append(ExcludeRule(group=group, module=module))

    def extends_from(self, *configurations: DependencyConfiguration) -> None:
        self._check_mutable("the hierarchy")
        for configuration in configurations:
            if configuration is self or self in configuration.hierarchy:
                raise BuildConfigurationError(
                    f"Cyclic extendsFrom between '{self.name}' and '{configuration.name}'."
                )
            if configuration not in self._extends_from:
                self._extends_from.append(configuration)

    @property
    def dependencies(self) -> tuple[Dependency, ...]:
        return tuple(self._dependencies)

    @property
    def excludes(self) -> tuple[ExcludeRule, ...]:
        return tuple(self._excludes)

    @property
    def hierarchy(self) -> tuple[DependencyConfiguration, ...]:
        """This configuration followed by everything it extends, transitively, without repeats."""
        seen: dict[int, DependencyConfiguration] = {}

        def visit(configuration: DependencyConfiguration) -> None:
            if id(configuration) in seen:
                return
            seen[id(configuration)] = configuration
            for parent in configuration._extends_from:
                visit(parent)

        visit(self)
        return tuple(seen.values())

    def all_dependencies(self) -> tuple[Dependency, ...]:
        """The declared dependencies of the whole hierarchy, minus those excluded here."""
        excludes = self._all_excludes()
        result: dict[Dependency, None] = {}
        for configuration in self.hierarchy:
            for dependency in configuration._dependencies:
                if isinstance(dependency, Coordinate) and any(
                    rule.excludes(dependency) for rule in excludes
                ):
                    continue
                result[dependency] = None
        return tuple(result)

    def _all_excludes(self) -> tuple[ExcludeRule, ...]:
        rules: dict[ExcludeRule, None] = {}
        for configuration in self.hierarchy:
            rules.update((rule, None) for rule in configuration._excludes)
        return tuple(rules)

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    def resolve(self) -> tuple[str, ...]:
        """Resolves this configuration to files, at most once."""
        if not self.can_be_resolved:
            raise ConfigurationResolutionError(
                f"Resolving configuration '{self.name}' directly is not allowed."
            )
        with self._lock:
            if self._resolved is None:
                self._resolved = self._do_resolve()
            return self._resolved

    def _do_resolve(self) -> tuple[str, ...]:
        dependencies = self.all_dependencies()
        coordinates = [d for d in dependencies if isinstance(d, Coordinate)]
        files = [d.path for d in dependencies if isinstance(d, FileDependency)]
        logger.debug(f"Resolving configuration '{self.name}': {len(dependencies)} dependencies.")
        resolved = self._resolver.resolve(coordinates, self._all_excludes()) if coordinates else []
        return tuple(dict.fromkeys([*resolved, *files]))

    def as_inputs(self) -> list[str]:
        """The declared dependencies, which stand for the resolved files in cache keys."""
        return [
            d.to_coord_str() if isinstance(d, Coordinate) else d.path
            for d in self.all_dependencies()
        ]

    @property
    def as_path(self) -> str:
        """The resolved files, joined with the platform path separator."""
        return os.pathsep.join(self.resolve())

    def __repr__(self) -> str:
        return f"DependencyConfiguration({self.name!r})"


class ConfigurationContainer:
    """The dependency configurations of a project, by name."""

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver
        self._configurations: dict[str, DependencyConfiguration] = {}

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    def create(self, name: str, **kwargs) -> DependencyConfiguration:
        if name in self._configurations:
            raise BuildConfigurationError(
                f"Cannot add a configuration with name '{name}' as a configuration with that name "
                "already exists."
            )
        configuration = DependencyConfiguration(name, self._resolver, **kwargs)
        self._configurations[name] = configuration
        return configuration

    def maybe_create(self, name: str, **kwargs) -> DependencyConfiguration:
        return self._configurations.get(name) or self.create(name, **kwargs)

    def get(self, name: str) -> DependencyConfiguration | None:
        return self._configurations.get(name)

    def __getitem__(self, name: str) -> DependencyConfiguration:
        try:
            return self._configurations[name]
        except KeyError:
            raise BuildConfigurationError(f"Configuration with name '{name}' not found.")

    def __contains__(self, name: object) -> bool:
        return name in self._configurations

    def __iter__(self) -> Iterator[DependencyConfiguration]:
        return iter(list(self._configurations.values()))

    @property
    def names(self) -> Iterable[str]:
        return tuple(self._configurations)
