# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, TypeVar

from errorprone_plugin.base.exceptions import BuildConfigurationError

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project
    from errorprone_plugin.java.executor import Executor

logger = logging.getLogger(__name__)


class TaskOutcome(Enum):
    NOT_EXECUTED = "not executed"
    SUCCESS = "success"
    FAILED = "failed"


class Task(ABC):
    """A unit of work in a project.

    Actions registered with `do_first` run right before the task's own work, after all
    configuration has happened; the most recently registered action runs first.
    """

    def __init__(self, name: str, project: Project) -> None:
        self.name = name
        self.project = project
        self.description = ""
        self.outcome = TaskOutcome.NOT_EXECUTED
        self._first_actions: list[tuple[str, Callable[[Any], Any]]] = []
        self._inputs: dict[str, Any] = {}

    @property
    def path(self) -> str:
        return f":{self.name}"

    def do_first(self, action_name: str, action: Callable[[Any], Any]) -> None:
        self._first_actions.insert(0, (action_name, action))

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._first_actions)

    def register_input(self, property_name: str, value: Any) -> None:
        """Declares an extra named input, folded into the task fingerprint."""
        self._inputs[property_name] = value

    @property
    def inputs(self) -> dict[str, Any]:
        return dict(self._inputs)

    def execute(self, executor: Executor) -> Any:
        try:
            for action_name, action in self._first_actions:
                logger.debug(f"{self.path}: running action '{action_name}'")
                action(self)
            result = self._run(executor)
        except Exception:
            self.outcome = TaskOutcome.FAILED
            raise
        self.outcome = TaskOutcome.SUCCESS
        return result

    @abstractmethod
    def _run(self, executor: Executor) -> Any:
        """Subclasses perform the task's work here."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path})"


_T = TypeVar("_T", bound=Task)


class TaskContainer:
    """The tasks of a project.

    Configuration actions are lazy with respect to task creation: `configure_each` applies to
    tasks registered later too, and `configure_named` waits for the named task to be registered.
    """

    def __init__(self, project: Project) -> None:
        self._project = project
        self._tasks: dict[str, Task] = {}
        self._type_actions: list[tuple[type[Task], Callable[[Any], None]]] = []
        self._named_actions: defaultdict[str, list[Callable[[Any], None]]] = defaultdict(list)

    def register(self, name: str, task_type: type[_T], **kwargs) -> _T:
        if name in self._tasks:
            raise BuildConfigurationError(
                f"Cannot add task '{name}' as a task with that name already exists."
            )
        task = task_type(name, self._project, **kwargs)
        self._tasks[name] = task
        for action_type, action in list(self._type_actions):
            if isinstance(task, action_type):
                action(task)
        for action in self._named_actions.get(name, ()):
            action(task)
        return task

    def configure_each(self, task_type: type[_T], action: Callable[[_T], None]) -> None:
        self._type_actions.append((task_type, action))
        for task in list(self._tasks.values()):
            if isinstance(task, task_type):
                action(task)

    def configure_named(self, name: str, action: Callable[[Any], None]) -> None:
        self._named_actions[name].append(action)
        task = self._tasks.get(name)
        if task is not None:
            action(task)

    def named(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise BuildConfigurationError(f"Task with name '{name}' not found in {self._project}.")

    def with_type(self, task_type: type[_T]) -> list[_T]:
        return [task for task in self._tasks.values() if isinstance(task, task_type)]

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._tasks)
