# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, TypeVar

from typing_extensions import Protocol, runtime_checkable

from errorprone_plugin.base.exceptions import BuildConfigurationError, TaskError
from errorprone_plugin.base.hash_utils import json_hash
from errorprone_plugin.build.configuration import DependencyConfiguration
from errorprone_plugin.build.tasks import Task

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project
    from errorprone_plugin.java.executor import CompileResult, Executor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class CommandLineArgumentProvider(Protocol):
    """Contributes compiler arguments computed when the compiler is invoked."""

    def as_arguments(self) -> Iterable[str]:
        ...


@dataclass
class ForkOptions:
    """How a forked compiler process is launched."""

    executable: str | None = None
    java_home: str | None = None
    memory_initial_size: str | None = None
    memory_maximum_size: str | None = None
    jvm_args: list[str] = field(default_factory=list)

    def all_jvm_args(self) -> list[str]:
        args = list(self.jvm_args)
        if self.memory_initial_size:
            args.append(f"-Xms{self.memory_initial_size}")
        if self.memory_maximum_size:
            args.append(f"-Xmx{self.memory_maximum_size}")
        return args


class ExtensionContainer:
    """Named extension objects attached to a build model object."""

    def __init__(self) -> None:
        self._extensions: dict[str, Any] = {}

    def create(self, name: str, factory: Callable[..., T], *args, **kwargs) -> T:
        if name in self._extensions:
            raise BuildConfigurationError(
                f"Cannot add extension with name '{name}', as there is an extension already "
                "registered with that name."
            )
        extension = factory(*args, **kwargs)
        self._extensions[name] = extension
        return extension

    def add(self, name: str, extension: Any) -> None:
        self.create(name, lambda: extension)

    def find_by_name(self, name: str) -> Any | None:
        return self._extensions.get(name)

    def get_by_name(self, name: str) -> Any:
        try:
            return self._extensions[name]
        except KeyError:
            raise BuildConfigurationError(f"Extension with name '{name}' does not exist.")

    def __contains__(self, name: object) -> bool:
        return name in self._extensions

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._extensions))


class CompileOptions:
    """Options of a Java compile task; extensions are reachable as attributes."""

    def __init__(self) -> None:
        self.compiler_args: list[str] = []
        self.compiler_argument_providers: list[CommandLineArgumentProvider] = []
        self.encoding: str | None = None
        self.fork = False
        self.fork_options = ForkOptions()
        self.extensions = ExtensionContainer()

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes not found the regular way.
        extensions = self.__dict__.get("extensions")
        if extensions is not None and name in extensions:
            return extensions.get_by_name(name)
        raise AttributeError(f"{type(self).__name__} has no attribute or extension '{name}'")


class JavaCompile(Task):
    """Compiles Java sources with javac, forked or with the build's default javac."""

    def __init__(
        self,
        name: str,
        project: Project,
        *,
        source: Iterable[str] = (),
        classpath: DependencyConfiguration | None = None,
        annotation_processor_path: DependencyConfiguration | None = None,
        destination_dir: str | None = None,
    ) -> None:
        super().__init__(name, project)
        self.source: list[str] = list(source)
        self.classpath = classpath
        self.annotation_processor_path = annotation_processor_path
        self.destination_dir = destination_dir or os.path.join(
            project.build_dir, "classes", "java", name
        )
        self.options = CompileOptions()

    def all_compiler_args(self) -> list[str]:
        """The explicit compiler args followed by those of every argument provider, in order."""
        args = list(self.options.compiler_args)
        for provider in self.options.compiler_argument_providers:
            args.extend(provider.as_arguments())
        return args

    def _javac(self, executor: Executor) -> str:
        fork_options = self.options.fork_options
        if self.options.fork:
            if fork_options.executable:
                return fork_options.executable
            if fork_options.java_home:
                return os.path.join(fork_options.java_home, "bin", "javac")
        return executor.default_javac

    def command_line(self, executor: Executor) -> list[str]:
        cmd = [self._javac(executor)]
        if self.options.fork:
            cmd.extend(f"-J{arg}" for arg in self.options.fork_options.all_jvm_args())
        cmd.extend(["-d", self.destination_dir])
        if self.options.encoding:
            cmd.extend(["-encoding", self.options.encoding])
        classpath = self.classpath.as_path if self.classpath is not None else ""
        if classpath:
            cmd.extend(["-classpath", classpath])
        processor_path = (
            self.annotation_processor_path.as_path
            if self.annotation_processor_path is not None
            else ""
        )
        if processor_path:
            cmd.extend(["-processorpath", processor_path])
        cmd.extend(self.all_compiler_args())
        cmd.extend(self.source)
        return cmd

    def as_inputs(self) -> dict[str, Any]:
        """The inputs this task's outputs depend on, for up-to-date checks and cache keys.

        Argument providers contribute their name and, when they have one, their nested inputs.
        """
        return {
            "source": sorted(self.source),
            "classpath": self.classpath,
            "annotation_processor_path": self.annotation_processor_path,
            "compiler_args": self.options.compiler_args,
            "encoding": self.options.encoding,
            "fork": self.options.fork,
            "fork_options": {
                "executable": self.options.fork_options.executable,
                "java_home": self.options.fork_options.java_home,
                "jvm_args": self.options.fork_options.all_jvm_args(),
            },
            "providers": [
                {
                    "name": getattr(provider, "name", type(provider).__name__),
                    "nested": getattr(provider, "nested_inputs", lambda: None)(),
                }
                for provider in self.options.compiler_argument_providers
            ],
            **self.inputs,
        }

    def fingerprint(self) -> str:
        return json_hash(self.as_inputs())

    def _run(self, executor: Executor) -> CompileResult | None:
        if not self.source:
            logger.info(f"{self.path}: no source files, skipping.")
            return None
        os.makedirs(self.destination_dir, exist_ok=True)
        command = self.command_line(executor)
        logger.debug(f"{self.path}: {' '.join(command)}")
        result = executor.execute(command, cwd=self.project.project_dir)
        if result.exit_code != 0:
            raise TaskError(
                f"Compilation failed for task '{self.path}'; see the compiler output below.\n"
                f"{result.output}",
                exit_code=result.exit_code,
                output=result.output,
                task_name=self.name,
            )
        if result.output:
            logger.info(result.output)
        return result
