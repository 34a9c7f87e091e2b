# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from errorprone_plugin.android.variants import Variant, VariantContainer, VariantKind, capitalize
from errorprone_plugin.base.exceptions import BuildConfigurationError
from errorprone_plugin.build.java_compile import JavaCompile
from errorprone_plugin.build.java_plugin import find_java_files
from errorprone_plugin.build.plugins import Plugin

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project

logger = logging.getLogger(__name__)

ANDROID_EXTENSION_NAME = "android"


class AndroidPluginKind(Enum):
    """The Android plugins, by the suffix of their `com.android.<kind>` id."""

    APPLICATION = ("application", VariantKind.APPLICATION, True)
    LIBRARY = ("library", VariantKind.LIBRARY, True)
    FEATURE = ("feature", VariantKind.FEATURE, True)
    TEST = ("test", VariantKind.TEST_APPLICATION, False)
    INSTANT_APP = ("instantapp", VariantKind.INSTANT_APP, False)

    _variant_kind: VariantKind
    _tested: bool

    def __new__(cls, value: str, variant_kind: VariantKind, tested: bool) -> AndroidPluginKind:
        member: AndroidPluginKind = object.__new__(cls)
        member._value_ = value
        member._variant_kind = variant_kind
        member._tested = tested
        return member

    @property
    def plugin_id(self) -> str:
        return f"com.android.{self.value}"

    @property
    def variant_kind(self) -> VariantKind:
        return self._variant_kind

    @property
    def tested(self) -> bool:
        """Whether the plugin also creates android test and unit test variants."""
        return self._tested


class AndroidExtension:
    """The `android` extension: build types, product flavors and the resulting variants.

    Variants are only created once the project is evaluated, after build scripts had a chance to
    declare build types and flavors.
    """

    def __init__(self, kind: AndroidPluginKind) -> None:
        self.kind = kind
        self.build_types: list[str] = ["debug", "release"]
        self.product_flavors: list[str] = []
        self.test_build_type = "debug"
        self.variants = VariantContainer()

    def _variant_names(self) -> Iterable[tuple[str, str, tuple[str, ...]]]:
        for build_type in self.build_types:
            if not self.product_flavors:
                yield build_type, build_type, ()
                continue
            for flavor in self.product_flavors:
                yield f"{flavor}{capitalize(build_type)}", build_type, (flavor,)

    def create_variants(self, project: Project) -> None:
        if self.test_build_type not in self.build_types:
            raise BuildConfigurationError(
                f"Test build type '{self.test_build_type}' is not one of the build types: "
                f"{', '.join(self.build_types)}."
            )
        for name, build_type, flavors in self._variant_names():
            variant = self._create(project, name, self.kind.variant_kind, build_type, flavors)
            if not self.kind.tested:
                continue
            if build_type == self.test_build_type:
                self._create(
                    project,
                    f"{name}AndroidTest",
                    VariantKind.ANDROID_TEST,
                    build_type,
                    flavors,
                    tested_variant=variant,
                )
            self._create(
                project,
                f"{name}UnitTest",
                VariantKind.UNIT_TEST,
                build_type,
                flavors,
                tested_variant=variant,
            )

    def _create(
        self,
        project: Project,
        name: str,
        kind: VariantKind,
        build_type: str,
        flavors: tuple[str, ...],
        *,
        tested_variant: Variant | None = None,
    ) -> Variant:
        configurations = project.configurations
        implementation = configurations.maybe_create(
            "implementation", can_be_resolved=False, can_be_consumed=False
        )
        classpath = configurations.create(f"{name}CompileClasspath", can_be_consumed=False)
        classpath.extends_from(implementation)
        annotation_processor = configurations.create(
            f"{name}AnnotationProcessorClasspath", visible=False, can_be_consumed=False
        )
        variant = Variant(
            name,
            kind,
            annotation_processor,
            build_type=build_type,
            flavors=flavors,
            tested_variant=tested_variant,
        )
        task = project.tasks.register(
            variant.java_compile_task_name,
            JavaCompile,
            classpath=classpath,
            annotation_processor_path=annotation_processor,
        )
        task.source = find_java_files(_source_dirs(project.project_dir, variant))
        self.variants.add(variant)
        return variant


def _source_dirs(project_dir: str, variant: Variant) -> list[str]:
    if variant.kind is VariantKind.ANDROID_TEST:
        names = ["androidTest"]
    elif variant.kind is VariantKind.UNIT_TEST:
        names = ["test"]
    else:
        names = ["main", *variant.flavors, variant.build_type]
        if variant.flavors:
            names.append(variant.name)
    return [os.path.join(project_dir, "src", name, "java") for name in names]


class AndroidPlugin(Plugin):
    """One of the `com.android.*` plugins."""

    def __init__(self, kind: AndroidPluginKind) -> None:
        self.kind = kind

    @property
    def plugin_id(self) -> str:
        return self.kind.plugin_id

    def apply(self, project: Project) -> None:
        existing = project.extensions.find_by_name(ANDROID_EXTENSION_NAME)
        if existing is not None:
            raise BuildConfigurationError(
                f"{self.plugin_id} cannot be applied to {project}, which already applies "
                f"{existing.kind.plugin_id}."
            )
        android = project.extensions.create(ANDROID_EXTENSION_NAME, AndroidExtension, self.kind)
        project.after_evaluate(android.create_variants)
