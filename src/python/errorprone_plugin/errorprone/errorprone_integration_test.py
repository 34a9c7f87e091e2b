# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import os

import pytest

from errorprone_plugin.base.exceptions import TaskError
from errorprone_plugin.build.project import Project
from errorprone_plugin.errorprone.plugin import ErrorPronePlugin
from errorprone_plugin.java.distribution import Distribution
from errorprone_plugin.java.executor import SubprocessExecutor
from errorprone_plugin.testutil.jvm import (
    FAILURE_DIAGNOSTIC,
    FAILURE_SOURCE,
    SUCCESS_SOURCE,
    maybe_skip_jdk_test,
    write_source,
)

# javac internals Error Prone needs on JDK 16 and later.
_EXPORTED_PACKAGES = ("api", "file", "main", "model", "parser", "processing", "tree", "util")
_OPENED_PACKAGES = ("code", "comp")


def _project(tmp_path) -> Project:
    distribution = Distribution.locate()
    project = Project("it", project_dir=str(tmp_path), distribution=distribution)
    project.apply("java", ErrorPronePlugin.PLUGIN_ID)
    project.configurations["errorprone"].files(
        *os.environ["ERRORPRONE_CLASSPATH"].split(os.pathsep)
    )
    if distribution.version.major >= 16:
        task = project.tasks.named("compileJava")
        task.options.fork = True
        jvm_args = task.options.fork_options.jvm_args
        for package in _EXPORTED_PACKAGES:
            jvm_args.append(f"--add-exports=jdk.compiler/com.sun.tools.javac.{package}=ALL-UNNAMED")
        for package in _OPENED_PACKAGES:
            jvm_args.append(f"--add-opens=jdk.compiler/com.sun.tools.javac.{package}=ALL-UNNAMED")
    return project


def _compile(project: Project):
    return project.execute("compileJava", executor=SubprocessExecutor(Distribution.locate()))


@maybe_skip_jdk_test
def test_compilation_succeeds(tmp_path) -> None:
    write_source(tmp_path, "main", "Success", SUCCESS_SOURCE)
    project = _project(tmp_path)
    (result,) = _compile(project)
    assert result.succeeded
    classes_dir = tmp_path / "build" / "classes" / "java" / "main"
    assert (classes_dir / "test" / "Success.class").is_file()


@maybe_skip_jdk_test
def test_compilation_fails(tmp_path) -> None:
    write_source(tmp_path, "main", "Failure", FAILURE_SOURCE)
    project = _project(tmp_path)
    with pytest.raises(TaskError) as exc:
        _compile(project)
    assert FAILURE_DIAGNOSTIC in exc.value.output
    assert exc.value.task_name == "compileJava"


@maybe_skip_jdk_test
def test_check_can_be_disabled(tmp_path) -> None:
    write_source(tmp_path, "main", "Failure", FAILURE_SOURCE)
    project = _project(tmp_path)
    project.tasks.named("compileJava").options.errorprone.disable("ArrayEquals")
    (result,) = _compile(project)
    assert result.succeeded


@maybe_skip_jdk_test
def test_errorprone_can_be_disabled(tmp_path) -> None:
    write_source(tmp_path, "main", "Failure", FAILURE_SOURCE)
    project = _project(tmp_path)
    project.tasks.named("compileJava").options.errorprone.enabled.set(False)
    (result,) = _compile(project)
    assert result.succeeded
