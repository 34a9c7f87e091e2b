# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import os
import subprocess
import threading
from typing import Sequence
from unittest import mock

import pytest

from errorprone_plugin.base.exceptions import (
    BuildConfigurationError,
    ConfigurationResolutionError,
)
from errorprone_plugin.build.configuration import (
    ConfigurationContainer,
    CoursierResolver,
    ExcludeRule,
    FileDependency,
    LocalRepositoryResolver,
    Resolver,
)
from errorprone_plugin.build.coordinate import Coordinate

CORE = "com.google.errorprone:error_prone_core:2.3.2"
JAVAC = "com.google.errorprone:javac:9+181-r4173-1"


class RecordingResolver(Resolver):
    def __init__(self) -> None:
        self.calls: list[tuple[list[Coordinate], list[ExcludeRule]]] = []

    def resolve(
        self, coordinates: Sequence[Coordinate], excludes: Sequence[ExcludeRule]
    ) -> list[str]:
        self.calls.append((list(coordinates), list(excludes)))
        return [f"/cache/{coord.file_name}" for coord in coordinates]


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver()


@pytest.fixture
def configurations(resolver: RecordingResolver) -> ConfigurationContainer:
    return ConfigurationContainer(resolver)


def test_create_and_lookup(configurations: ConfigurationContainer) -> None:
    errorprone = configurations.create("errorprone", visible=False, can_be_consumed=False)
    assert configurations["errorprone"] is errorprone
    assert "errorprone" in configurations
    assert configurations.maybe_create("errorprone") is errorprone
    assert not errorprone.visible and not errorprone.can_be_consumed and errorprone.can_be_resolved
    with pytest.raises(BuildConfigurationError, match="already exists"):
        configurations.create("errorprone")
    with pytest.raises(BuildConfigurationError, match="not found"):
        configurations["missing"]


def test_resolve_is_memoized(
    configurations: ConfigurationContainer, resolver: RecordingResolver
) -> None:
    javac = configurations.create("errorproneJavac")
    javac.add(JAVAC)
    assert javac.as_path == "/cache/javac-9+181-r4173-1.jar"
    assert javac.as_path == "/cache/javac-9+181-r4173-1.jar"
    assert len(resolver.calls) == 1
    assert javac.is_resolved


def test_resolve_at_most_once_under_concurrency(
    configurations: ConfigurationContainer, resolver: RecordingResolver
) -> None:
    javac = configurations.create("errorproneJavac")
    javac.add(JAVAC)
    barrier = threading.Barrier(8)
    results = []

    def resolve() -> None:
        barrier.wait()
        results.append(javac.as_path)

    threads = [threading.Thread(target=resolve) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(set(results)) == 1
    assert len(resolver.calls) == 1


def test_empty_configuration_resolves_blank(
    configurations: ConfigurationContainer, resolver: RecordingResolver
) -> None:
    assert configurations.create("errorproneJavac").as_path == ""
    assert resolver.calls == []


def test_cannot_mutate_after_resolution(configurations: ConfigurationContainer) -> None:
    javac = configurations.create("errorproneJavac")
    javac.resolve()
    with pytest.raises(BuildConfigurationError, match="after it has been resolved"):
        javac.add(JAVAC)


def test_not_resolvable(configurations: ConfigurationContainer) -> None:
    compile_only = configurations.create("compileOnly", can_be_resolved=False)
    with pytest.raises(ConfigurationResolutionError, match="not allowed"):
        compile_only.resolve()


def test_extends_from_inherits_dependencies_and_excludes(
    configurations: ConfigurationContainer, resolver: RecordingResolver
) -> None:
    errorprone = configurations.create("errorprone")
    errorprone.exclude(group="com.google.errorprone", module="javac")
    errorprone.add(CORE, JAVAC)
    processor = configurations.create("annotationProcessor")
    processor.files("/libs/autovalue.jar")
    processor.extends_from(errorprone)

    assert processor.resolve() == (
        "/cache/error_prone_core-2.3.2.jar",
        "/libs/autovalue.jar",
    )
    (coordinates, excludes), = resolver.calls
    assert coordinates == [Coordinate.from_coord_str(CORE)]
    assert excludes == [ExcludeRule("com.google.errorprone", "javac")]
    assert errorprone.all_dependencies() == (Coordinate.from_coord_str(CORE),)


def test_extends_from_rejects_cycles(configurations: ConfigurationContainer) -> None:
    a = configurations.create("a")
    b = configurations.create("b")
    a.extends_from(b)
    with pytest.raises(BuildConfigurationError, match="Cyclic"):
        b.extends_from(a)
    assert a.hierarchy == (a, b)


def test_exclude_requires_a_selector(configurations: ConfigurationContainer) -> None:
    with pytest.raises(ValueError):
        configurations.create("a").exclude()


def test_local_repository_resolver(tmp_path) -> None:
    coord = Coordinate.from_coord_str(JAVAC)
    jar = coord.repository_path(str(tmp_path))
    os.makedirs(os.path.dirname(jar))
    open(jar, "wb").close()
    resolver = LocalRepositoryResolver(str(tmp_path))
    assert resolver.resolve([coord], []) == [jar]
    with pytest.raises(ConfigurationResolutionError, match="Could not find"):
        resolver.resolve([Coordinate.from_coord_str(CORE)], [])


def test_coursier_resolver_command() -> None:
    resolver = CoursierResolver("cs", repositories=["https://repo1.maven.org/maven2"])
    assert resolver.command(
        [Coordinate.from_coord_str(CORE)], [ExcludeRule("com.google.errorprone", "javac")]
    ) == [
        "cs",
        "fetch",
        "--classpath",
        "-r",
        "https://repo1.maven.org/maven2",
        "--exclude",
        "com.google.errorprone:javac",
        CORE,
    ]


def test_coursier_resolver_runs_coursier() -> None:
    completed = subprocess.CompletedProcess(
        args=[], returncode=0, stdout=f"/a.jar{os.pathsep}/b.jar\n", stderr=""
    )
    with mock.patch("subprocess.run", return_value=completed) as run:
        paths = CoursierResolver().resolve([Coordinate.from_coord_str(CORE)], [])
    assert paths == ["/a.jar", "/b.jar"]
    assert run.call_args[0][0][:3] == ["cs", "fetch", "--classpath"]


def test_coursier_resolver_failure() -> None:
    completed = subprocess.CompletedProcess(
        args=[], returncode=1, stdout="", stderr="Resolution error"
    )
    with mock.patch("subprocess.run", return_value=completed):
        with pytest.raises(ConfigurationResolutionError, match="Resolution error"):
            CoursierResolver().resolve([Coordinate.from_coord_str(CORE)], [])


def test_file_dependencies_are_deduplicated(configurations: ConfigurationContainer) -> None:
    javac = configurations.create("errorproneJavac")
    javac.add(FileDependency("/libs/javac.jar"), FileDependency("/libs/javac.jar"))
    assert javac.as_path == "/libs/javac.jar"
