# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import ast
import os
import shutil
from pathlib import Path
from textwrap import dedent

import pytest

from errorprone_plugin.build.project import Project
from errorprone_plugin.java.distribution import JavaVersion

JAVA8 = JavaVersion.parse("1.8.0_292")
JAVA11 = JavaVersion.parse("11.0.11")

SUCCESS_SOURCE = dedent(
    """\
    package test;

    public class Success {
        // See http://errorprone.info/bugpattern/ArrayEquals
        @SuppressWarnings("ArrayEquals")
        public boolean arrayEquals(int[] a, int[] b) {
            return a.equals(b);
        }
    }
    """
)

FAILURE_SOURCE = dedent(
    """\
    package test;

    public class Failure {
        // See http://errorprone.info/bugpattern/ArrayEquals
        public boolean arrayEquals(int[] a, int[] b) {
            return a.equals(b);
        }
    }
    """
)

FAILURE_DIAGNOSTIC = "Failure.java:6: error: [ArrayEquals]"


def maybe_skip_jdk_test(func):
    """Skips tests that run a real javac with Error Prone unless asked for and set up.

    Set `ERRORPRONE_RUN_JDK_TESTS=True` and `ERRORPRONE_CLASSPATH` to the Error Prone annotation
    processor path (`error_prone_core` and its dependencies).
    """
    run_jdk_tests = bool(ast.literal_eval(os.environ.get("ERRORPRONE_RUN_JDK_TESTS", "False")))
    ready = run_jdk_tests and bool(os.environ.get("ERRORPRONE_CLASSPATH"))
    ready = ready and bool(os.environ.get("JAVA_HOME") or shutil.which("javac"))
    return pytest.mark.skipif(not ready, reason="Skip JDK tests")(func)


def make_project(tmp_path: Path, *plugin_ids: str, **kwargs) -> Project:
    """A project rooted at `tmp_path`, on Java 11 unless a `java_version` is given."""
    kwargs.setdefault("java_version", JAVA11)
    project = Project("test", project_dir=str(tmp_path), **kwargs)
    project.apply(*plugin_ids)
    return project


def write_source(tmp_path: Path, source_set: str, class_name: str, content: str) -> Path:
    path = tmp_path / "src" / source_set / "java" / "test" / f"{class_name}.java"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
