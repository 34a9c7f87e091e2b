# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import subprocess
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from errorprone_plugin.java.distribution import Distribution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    command: tuple[str, ...]
    exit_code: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class Executor(ABC):
    """Executes compiler command lines built by compile tasks."""

    class Error(Exception):
        """Indicates an error launching a compiler."""

    def __init__(self, distribution: Distribution | None = None) -> None:
        self._distribution = distribution

    @property
    def distribution(self) -> Distribution:
        """Returns the `Distribution` whose javac runs unforked compilations."""
        if self._distribution is None:
            self._distribution = Distribution.locate()
        return self._distribution

    @property
    def default_javac(self) -> str:
        return self.distribution.javac

    @abstractmethod
    def execute(self, command: Sequence[str], cwd: str | None = None) -> CompileResult:
        """Runs the command and returns its result; a non-zero exit code is not an error here."""


class SubprocessExecutor(Executor):
    """Runs compilers as subprocesses, capturing stdout and stderr together."""

    def execute(self, command: Sequence[str], cwd: str | None = None) -> CompileResult:
        logger.debug(f"Executing: {' '.join(command)}")
        try:
            process = subprocess.run(
                list(command),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise self.Error(f"Problem executing {command[0]}: {e}")
        return CompileResult(tuple(command), process.returncode, process.stdout)


class CommandLineGrabber(Executor):
    """Doesn't actually execute anything, just captures the command lines."""

    def __init__(
        self,
        distribution: Distribution | None = None,
        *,
        javac: str = "javac",
        exit_code: int = 0,
        output: str = "",
    ) -> None:
        super().__init__(distribution)
        self._javac = javac
        self._exit_code = exit_code
        self._output = output
        self._lock = threading.Lock()
        self._commands: list[tuple[str, ...]] = []

    @property
    def default_javac(self) -> str:
        return self._distribution.javac if self._distribution else self._javac

    def execute(self, command: Sequence[str], cwd: str | None = None) -> CompileResult:
        with self._lock:
            self._commands.append(tuple(command))
        return CompileResult(tuple(command), self._exit_code, self._output)

    @property
    def commands(self) -> list[tuple[str, ...]]:
        with self._lock:
            return list(self._commands)

    @property
    def cmd(self) -> str | None:
        """The last command line captured, as a string."""
        commands = self.commands
        return " ".join(commands[-1]) if commands else None
