# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Sequence

from errorprone_plugin.base.exceptions import BuildConfigurationError
from errorprone_plugin.build.configuration import (
    ConfigurationContainer,
    LocalRepositoryResolver,
    Resolver,
)
from errorprone_plugin.build.java_compile import ExtensionContainer
from errorprone_plugin.build.plugins import PluginContainer, PluginRegistry
from errorprone_plugin.build.tasks import Task, TaskContainer
from errorprone_plugin.java.distribution import Distribution, JavaVersion
from errorprone_plugin.java.executor import Executor, SubprocessExecutor
from errorprone_plugin.version import HOST_API_VERSION, Version

logger = logging.getLogger(__name__)


class Project:
    """A build: dependency configurations, plugins, tasks and extensions.

    :param name: the project name.
    :param project_dir: the directory compilers run in; defaults to the working directory.
    :param build_dir: where outputs go; defaults to `<project_dir>/build`.
    :param resolver: resolves dependency configurations; defaults to the local Maven repository.
    :param plugin_registry: the plugins that may be applied; defaults to the built-in backends.
    :param java_version: the version of the JVM running the build; detected when not given.
    :param distribution: the JDK used to detect the version and to compile unforked.
    :param host_version: the build model API version plugins are applied against.
    """

    def __init__(
        self,
        name: str = "project",
        *,
        project_dir: str | None = None,
        build_dir: str | None = None,
        resolver: Resolver | None = None,
        plugin_registry: PluginRegistry | None = None,
        java_version: JavaVersion | None = None,
        distribution: Distribution | None = None,
        host_version: Version | str = HOST_API_VERSION,
    ) -> None:
        self.name = name
        self.project_dir = project_dir or os.getcwd()
        self.build_dir = build_dir or os.path.join(self.project_dir, "build")
        self.host_version = Version(str(host_version))
        self.configurations = ConfigurationContainer(resolver or LocalRepositoryResolver())
        self.tasks = TaskContainer(self)
        self.extensions = ExtensionContainer()
        if plugin_registry is None:
            # Imported here since backends import this module.
            from errorprone_plugin.init.extension_loader import load_default_backends

            plugin_registry = load_default_backends()
        self.plugins = PluginContainer(self, plugin_registry)
        self._distribution = distribution
        self._java_version = java_version
        self._java_version_detected = java_version is not None
        self._after_evaluate: list[Callable[[Project], None]] = []
        self._evaluated = False

    def apply(self, *plugin_ids: str) -> None:
        for plugin_id in plugin_ids:
            self.plugins.apply(plugin_id)

    @property
    def java_version(self) -> JavaVersion | None:
        """The version of the JVM running the build, or None if no JDK could be found."""
        if not self._java_version_detected:
            self._java_version_detected = True
            try:
                distribution = self._distribution or Distribution.locate()
                self._java_version = distribution.version
            except Distribution.Error as e:
                logger.debug(f"Could not determine the Java version of the build: {e}")
        return self._java_version

    def after_evaluate(self, action: Callable[[Project], None]) -> None:
        """Runs the action once configuration is complete, or right away if it already is."""
        if self._evaluated:
            action(self)
        else:
            self._after_evaluate.append(action)

    def evaluate(self) -> None:
        """Marks configuration complete, running `after_evaluate` actions once."""
        if self._evaluated:
            return
        self._evaluated = True
        for action in self._after_evaluate:
            action(self)
        self._after_evaluate.clear()

    @property
    def evaluated(self) -> bool:
        return self._evaluated

    def execute(
        self,
        *task_names: str,
        executor: Executor | None = None,
        max_workers: int = 1,
    ) -> list[Any]:
        """Evaluates the project, then runs the named tasks and returns their results in order.

        Run serially, the first failing task stops the build. With `max_workers > 1` tasks run
        concurrently and every task runs even if another fails; the first failure, in task order,
        is raised afterwards.
        """
        self.evaluate()
        if not task_names:
            raise BuildConfigurationError("No tasks to execute.")
        tasks: Sequence[Task] = [self.tasks.named(name) for name in task_names]
        executor = executor or SubprocessExecutor(self._distribution)
        if max_workers <= 1:
            return [task.execute(executor) for task in tasks]

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(task.execute, executor) for task in tasks]
        results = []
        for future in futures:
            results.append(future.result())
        return results

    def __str__(self) -> str:
        return f"project '{self.name}'"
