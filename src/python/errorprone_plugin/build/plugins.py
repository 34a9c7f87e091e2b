# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Iterable, Mapping

from errorprone_plugin.base.exceptions import BuildConfigurationError, UnknownPluginError

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """A unit of build logic applied to a project at most once, identified by `plugin_id`."""

    @property
    @abstractmethod
    def plugin_id(self) -> str:
        """The id build authors apply this plugin by."""

    @abstractmethod
    def apply(self, project: Project) -> None:
        """Configures the project."""


PluginFactory = Callable[[], Plugin]


class PluginRegistry:
    """Maps plugin ids to factories, as registered by backends."""

    def __init__(self, factories: Mapping[str, PluginFactory] | None = None) -> None:
        self._factories: dict[str, PluginFactory] = {}
        for plugin_id, factory in (factories or {}).items():
            self.register(plugin_id, factory)

    def register(self, plugin_id: str, factory: PluginFactory) -> None:
        existing = self._factories.get(plugin_id)
        if existing is not None and existing is not factory:
            raise BuildConfigurationError(
                f"Plugin id '{plugin_id}' is registered by more than one backend."
            )
        self._factories[plugin_id] = factory

    def __getitem__(self, plugin_id: str) -> PluginFactory:
        try:
            return self._factories[plugin_id]
        except KeyError:
            raise UnknownPluginError(plugin_id)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._factories

    @property
    def plugin_ids(self) -> Iterable[str]:
        return tuple(self._factories)


class PluginContainer:
    """The plugins applied to a project.

    Actions registered with `with_id` run once the plugin is applied, immediately if it already
    has been. This lets a plugin react to others regardless of the order they are applied in.
    """

    def __init__(self, project: Project, registry: PluginRegistry) -> None:
        self._project = project
        self._registry = registry
        self._applied: dict[str, Plugin] = {}
        self._in_progress: set[str] = set()
        self._actions: defaultdict[str, list[Callable[[Plugin], None]]] = defaultdict(list)

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    def apply(self, plugin_id: str) -> Plugin:
        applied = self._applied.get(plugin_id)
        if applied is not None:
            return applied
        if plugin_id in self._in_progress:
            raise BuildConfigurationError(f"Plugin '{plugin_id}' is applied recursively.")
        plugin = self._registry[plugin_id]()
        self._in_progress.add(plugin_id)
        try:
            logger.debug(f"Applying plugin {plugin_id} to project {self._project.name}")
            plugin.apply(self._project)
        finally:
            self._in_progress.discard(plugin_id)
        self._applied[plugin_id] = plugin
        for action in self._actions[plugin_id]:
            action(plugin)
        return plugin

    def with_id(self, plugin_id: str, action: Callable[[Plugin], None]) -> None:
        self._actions[plugin_id].append(action)
        applied = self._applied.get(plugin_id)
        if applied is not None:
            action(applied)

    def has_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self._applied

    def find_plugin(self, plugin_id: str) -> Plugin | None:
        return self._applied.get(plugin_id)

    @property
    def applied_ids(self) -> tuple[str, ...]:
        return tuple(self._applied)
