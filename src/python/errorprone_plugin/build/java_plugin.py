# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from errorprone_plugin.base.exceptions import BuildConfigurationError
from errorprone_plugin.build.java_compile import JavaCompile
from errorprone_plugin.build.plugins import Plugin

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project

logger = logging.getLogger(__name__)

MAIN_SOURCE_SET_NAME = "main"
TEST_SOURCE_SET_NAME = "test"
COMPILE_JAVA_TASK_NAME = "compileJava"
COMPILE_TEST_JAVA_TASK_NAME = "compileTestJava"


def find_java_files(srcdirs: Iterable[str]) -> list[str]:
    """All `.java` files under the given directories, in a stable order."""
    files = []
    for srcdir in srcdirs:
        for root, dirs, names in os.walk(srcdir):
            dirs.sort()
            files.extend(os.path.join(root, n) for n in sorted(names) if n.endswith(".java"))
    return files


class SourceSet:
    """A group of Java sources compiled together, with its own configurations and compile task."""

    def __init__(self, name: str, project_dir: str, build_dir: str) -> None:
        self.name = name
        self.java_srcdirs: list[str] = [os.path.join(project_dir, "src", name, "java")]
        self.output_dir = os.path.join(build_dir, "classes", "java", name)

    def _name_for(self, prefix: str, suffix: str) -> str:
        if self.name == MAIN_SOURCE_SET_NAME:
            return f"{prefix}{suffix}" if prefix else suffix[0].lower() + suffix[1:]
        base = f"{prefix}{self.name[0].upper()}{self.name[1:]}" if prefix else self.name
        return f"{base}{suffix}"

    @property
    def compile_java_task_name(self) -> str:
        return self._name_for("compile", "Java")

    @property
    def implementation_configuration_name(self) -> str:
        return self._name_for("", "Implementation")

    @property
    def compile_classpath_configuration_name(self) -> str:
        return self._name_for("", "CompileClasspath")

    @property
    def annotation_processor_configuration_name(self) -> str:
        return self._name_for("", "AnnotationProcessor")

    def java_files(self) -> list[str]:
        return find_java_files(self.java_srcdirs)

    def __repr__(self) -> str:
        return f"SourceSet({self.name!r})"


class SourceSetContainer:
    """The source sets of a project; actions given to `configure_each` also see later ones."""

    def __init__(self, project: Project) -> None:
        self._project = project
        self._source_sets: dict[str, SourceSet] = {}
        self._actions: list[Callable[[SourceSet], None]] = []

    def create(self, name: str) -> SourceSet:
        if name in self._source_sets:
            raise BuildConfigurationError(f"Source set '{name}' already exists.")
        source_set = SourceSet(name, self._project.project_dir, self._project.build_dir)
        self._source_sets[name] = source_set
        for action in list(self._actions):
            action(source_set)
        return source_set

    def maybe_create(self, name: str) -> SourceSet:
        return self._source_sets.get(name) or self.create(name)

    def configure_each(self, action: Callable[[SourceSet], None]) -> None:
        self._actions.append(action)
        for source_set in list(self._source_sets.values()):
            action(source_set)

    def __getitem__(self, name: str) -> SourceSet:
        try:
            return self._source_sets[name]
        except KeyError:
            raise BuildConfigurationError(f"Source set '{name}' not found.")

    def __contains__(self, name: object) -> bool:
        return name in self._source_sets

    def __iter__(self) -> Iterator[SourceSet]:
        return iter(list(self._source_sets.values()))


class JavaBasePlugin(Plugin):
    """Adds the `source_sets` extension, and configurations plus a compile task per source set."""

    PLUGIN_ID = "java-base"

    @property
    def plugin_id(self) -> str:
        return self.PLUGIN_ID

    def apply(self, project: Project) -> None:
        source_sets = project.extensions.create("source_sets", SourceSetContainer, project)
        source_sets.configure_each(lambda source_set: self._configure(project, source_set))

    @staticmethod
    def _configure(project: Project, source_set: SourceSet) -> None:
        configurations = project.configurations
        implementation = configurations.maybe_create(
            source_set.implementation_configuration_name,
            description=f"Implementation only dependencies for {source_set.name}.",
            can_be_resolved=False,
            can_be_consumed=False,
        )
        compile_classpath = configurations.maybe_create(
            source_set.compile_classpath_configuration_name,
            description=f"Compile classpath for {source_set.name}.",
            can_be_consumed=False,
        )
        compile_classpath.extends_from(implementation)
        annotation_processor = configurations.maybe_create(
            source_set.annotation_processor_configuration_name,
            description=f"Annotation processors and their dependencies for {source_set.name}.",
            visible=False,
            can_be_consumed=False,
        )
        task = project.tasks.register(
            source_set.compile_java_task_name,
            JavaCompile,
            classpath=compile_classpath,
            annotation_processor_path=annotation_processor,
            destination_dir=source_set.output_dir,
        )
        task.description = f"Compiles {source_set.name} Java source."

        def collect_sources(p: Project) -> None:
            if not task.source:
                task.source = source_set.java_files()

        project.after_evaluate(collect_sources)


class JavaPlugin(Plugin):
    """Applies `java-base` and adds the `main` and `test` source sets."""

    PLUGIN_ID = "java"

    @property
    def plugin_id(self) -> str:
        return self.PLUGIN_ID

    def apply(self, project: Project) -> None:
        project.apply(JavaBasePlugin.PLUGIN_ID)
        source_sets: SourceSetContainer = project.extensions.get_by_name("source_sets")
        main = source_sets.maybe_create(MAIN_SOURCE_SET_NAME)
        test = source_sets.maybe_create(TEST_SOURCE_SET_NAME)
        configurations = project.configurations
        configurations[test.implementation_configuration_name].extends_from(
            configurations[main.implementation_configuration_name]
        )
        configurations[test.compile_classpath_configuration_name].files(main.output_dir)
