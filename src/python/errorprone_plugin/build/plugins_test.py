# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import pytest

from errorprone_plugin.base.exceptions import BuildConfigurationError, UnknownPluginError
from errorprone_plugin.build.plugins import Plugin, PluginRegistry
from errorprone_plugin.build.project import Project


class RecordingPlugin(Plugin):
    applied: list[str] = []

    def __init__(self, plugin_id: str, requires: tuple[str, ...] = ()) -> None:
        self._plugin_id = plugin_id
        self._requires = requires

    @property
    def plugin_id(self) -> str:
        return self._plugin_id

    def apply(self, project: Project) -> None:
        project.apply(*self._requires)
        self.applied.append(self._plugin_id)


@pytest.fixture
def project(tmp_path) -> Project:
    RecordingPlugin.applied = []
    registry = PluginRegistry(
        {
            "base": lambda: RecordingPlugin("base"),
            "child": lambda: RecordingPlugin("child", requires=("base",)),
            "loop": lambda: RecordingPlugin("loop", requires=("loop",)),
        }
    )
    return Project(project_dir=str(tmp_path), plugin_registry=registry)


def test_applies_once(project: Project) -> None:
    first = project.plugins.apply("child")
    assert project.plugins.apply("child") is first
    project.apply("base")
    assert RecordingPlugin.applied == ["base", "child"]
    assert project.plugins.applied_ids == ("base", "child")


def test_unknown_plugin(project: Project) -> None:
    with pytest.raises(UnknownPluginError, match="Plugin with id 'kotlin' not found."):
        project.apply("kotlin")
    assert not project.plugins.has_plugin("kotlin")


def test_recursive_apply(project: Project) -> None:
    with pytest.raises(BuildConfigurationError, match="applied recursively"):
        project.apply("loop")
    assert project.plugins.find_plugin("loop") is None


def test_with_id_runs_regardless_of_order(project: Project) -> None:
    seen = []
    project.plugins.with_id("base", lambda plugin: seen.append(("before", plugin.plugin_id)))
    project.apply("base")
    project.plugins.with_id("base", lambda plugin: seen.append(("after", plugin.plugin_id)))
    project.plugins.with_id("child", lambda plugin: seen.append(("never", plugin.plugin_id)))
    assert seen == [("before", "base"), ("after", "base")]


def test_registry_rejects_conflicting_ids() -> None:
    def factory() -> Plugin:
        return RecordingPlugin("a")

    registry = PluginRegistry({"a": factory})
    registry.register("a", factory)
    with pytest.raises(BuildConfigurationError, match="registered by more than one backend"):
        registry.register("a", lambda: RecordingPlugin("a"))
    assert registry.plugin_ids == ("a",)
    assert "a" in registry
    assert "b" not in registry
