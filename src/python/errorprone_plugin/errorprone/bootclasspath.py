# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Puts the Error Prone javac on the bootclasspath of JDK 8 compilations.

JDK 8's javac cannot load Error Prone; the `com.google.errorprone:javac` artifact replaces it, which
requires forking the compiler with that artifact prepended to its bootclasspath.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from errorprone_plugin.build.configuration import DependencyConfiguration
from errorprone_plugin.build.java_compile import ForkOptions, JavaCompile
from errorprone_plugin.errorprone.options import ErrorProneOptions

logger = logging.getLogger(__name__)

JAVAC_CONFIGURATION_NAME = "errorproneJavac"

NO_JAVAC_DEPENDENCY_WARNING_MESSAGE = f"""\
No dependency was configured in configuration {JAVAC_CONFIGURATION_NAME}, compilation with Error Prone will likely fail as a result.
Add a dependency to com.google.errorprone:javac with the appropriate version corresponding to the version of Error Prone you're using:

    dependencies {{
        {JAVAC_CONFIGURATION_NAME}("com.google.errorprone:javac:$errorproneJavacVersion")
    }}
"""

BOOTCLASSPATH_PREFIX = "-Xbootclasspath/p:"


class BootclasspathState(Enum):
    NOT_NEEDED = "not needed"
    NEEDS_PATCH = "needs patch"
    PATCHED = "patched"
    WARNED_NO_ARTIFACT = "warned no artifact"


class OneShotLatch:
    """A boolean flipped at most once, safe to race on."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = False

    def compare_and_set(self, expected: bool, new: bool) -> bool:
        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True

    @property
    def value(self) -> bool:
        return self._value


class BootclasspathHook:
    """The `do_first` action patching a compile task's forked JVM right before it runs.

    One hook serves every compile task of a build, so the missing-javac warning is logged at most
    once however many tasks (or threads) hit it.
    """

    ACTION_NAME = "configure errorprone in bootclasspath"

    def __init__(self, javac_configuration: DependencyConfiguration) -> None:
        self._javac_configuration = javac_configuration
        self._warned = OneShotLatch()
        self._lock = threading.Lock()
        self._states: dict[str, BootclasspathState] = {}

    @property
    def states(self) -> dict[str, BootclasspathState]:
        """The final state of each task the hook ran for, by task path."""
        with self._lock:
            return dict(self._states)

    def __call__(self, task: JavaCompile) -> BootclasspathState:
        state = self._patch(task)
        logger.debug(f"{task.path}: Error Prone bootclasspath {state.value}.")
        with self._lock:
            self._states[task.path] = state
        return state

    def _patch(self, task: JavaCompile) -> BootclasspathState:
        options = task.options
        errorprone: ErrorProneOptions = options.extensions.get_by_name(ErrorProneOptions.NAME)
        if not errorprone.is_enabled:
            return BootclasspathState.NOT_NEEDED
        if options.fork and (options.fork_options.java_home or options.fork_options.executable):
            # The build author chose the compiler; leave it alone.
            return BootclasspathState.NOT_NEEDED

        if not options.fork:
            options.fork = True
            # Fork options set while not forking do not carry over.
            options.fork_options = ForkOptions()
        # Left as is if resolution fails.
        with self._lock:
            self._states[task.path] = BootclasspathState.NEEDS_PATCH
        classpath = self._javac_configuration.as_path
        if classpath.strip():
            flag = f"{BOOTCLASSPATH_PREFIX}{classpath}"
            jvm_args = options.fork_options.jvm_args
            if flag not in jvm_args:
                jvm_args.insert(0, flag)
            return BootclasspathState.PATCHED
        if self._warned.compare_and_set(False, True):
            logger.warning(NO_JAVAC_DEPENDENCY_WARNING_MESSAGE)
        return BootclasspathState.WARNED_NO_ARTIFACT
