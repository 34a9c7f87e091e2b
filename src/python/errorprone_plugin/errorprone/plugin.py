# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from errorprone_plugin.android.defaults import configure_variant
from errorprone_plugin.android.plugin import (
    ANDROID_EXTENSION_NAME,
    AndroidExtension,
    AndroidPluginKind,
)
from errorprone_plugin.base.exceptions import UnsupportedHostVersionError
from errorprone_plugin.build.configuration import DependencyConfiguration
from errorprone_plugin.build.java_compile import JavaCompile
from errorprone_plugin.build.java_plugin import (
    COMPILE_TEST_JAVA_TASK_NAME,
    JavaBasePlugin,
    JavaPlugin,
    SourceSet,
    SourceSetContainer,
)
from errorprone_plugin.build.plugins import Plugin
from errorprone_plugin.errorprone.argument_provider import ErrorProneCompilerArgumentProvider
from errorprone_plugin.errorprone.bootclasspath import JAVAC_CONFIGURATION_NAME, BootclasspathHook
from errorprone_plugin.errorprone.options import ErrorProneOptions
from errorprone_plugin.version import Version

if TYPE_CHECKING:
    from errorprone_plugin.build.project import Project

logger = logging.getLogger(__name__)


def errorprone_options(task: JavaCompile) -> ErrorProneOptions:
    """The Error Prone options of a compile task the plugin has configured."""
    return task.options.extensions.get_by_name(ErrorProneOptions.NAME)


class ErrorPronePlugin(Plugin):
    """Runs Error Prone as part of every Java compilation of a project.

    Applying the plugin adds two dependency configurations: `errorprone`, for Error Prone itself,
    which every annotation processor path extends; and `errorproneJavac`, the javac replacement
    needed to run Error Prone on JDK 8. Each `JavaCompile` task gets an `errorprone` options
    extension. Error Prone is enabled by convention for the compile tasks of source sets and
    Android variants; other compile tasks have to enable it explicitly.
    """

    PLUGIN_ID = "net.ltgt.errorprone"
    CONFIGURATION_NAME = "errorprone"
    JAVAC_CONFIGURATION_NAME = JAVAC_CONFIGURATION_NAME
    MINIMUM_HOST_VERSION = Version("4.10")

    def __init__(self) -> None:
        self.bootclasspath_hook: BootclasspathHook | None = None

    @property
    def plugin_id(self) -> str:
        return self.PLUGIN_ID

    def apply(self, project: Project) -> None:
        if project.host_version < self.MINIMUM_HOST_VERSION:
            raise UnsupportedHostVersionError(
                self.PLUGIN_ID, self.MINIMUM_HOST_VERSION, project.host_version
            )

        errorprone_configuration = project.configurations.create(
            self.CONFIGURATION_NAME,
            description=(
                "Error Prone dependencies, will be extended by all source sets' "
                "annotationProcessor configurations"
            ),
            visible=False,
            can_be_consumed=False,
            # Resolvable so the Error Prone classpath can be inspected.
            can_be_resolved=True,
        )
        errorprone_configuration.exclude(group="com.google.errorprone", module="javac")
        javac_configuration = project.configurations.create(
            self.JAVAC_CONFIGURATION_NAME,
            description=(
                "Error Prone Javac dependencies, will only be used when using JDK 8 "
                "(i.e. not JDK 9 or superior)"
            ),
            visible=False,
            can_be_consumed=False,
            can_be_resolved=True,
        )

        java_version = project.java_version
        if java_version is not None and java_version.is_java8:
            logger.debug(f"Running on Java {java_version}, Error Prone javac will be needed.")
            self.bootclasspath_hook = BootclasspathHook(javac_configuration)

        project.tasks.configure_each(
            JavaCompile, lambda task: self._configure_compile(task, javac_configuration)
        )
        project.plugins.with_id(
            JavaBasePlugin.PLUGIN_ID,
            lambda _: self._configure_java_base(project, errorprone_configuration),
        )
        project.plugins.with_id(JavaPlugin.PLUGIN_ID, lambda _: self._configure_java(project))
        for kind in AndroidPluginKind:
            project.plugins.with_id(
                kind.plugin_id, lambda _: self._configure_android(project, errorprone_configuration)
            )

    def _configure_compile(
        self, task: JavaCompile, javac_configuration: DependencyConfiguration
    ) -> None:
        options = task.options.extensions.create(ErrorProneOptions.NAME, ErrorProneOptions)
        task.options.compiler_argument_providers.append(ErrorProneCompilerArgumentProvider(options))
        if self.bootclasspath_hook is not None:
            # The task may still end up running another JVM, but most likely will need this.
            task.register_input(self.JAVAC_CONFIGURATION_NAME, javac_configuration)
            task.do_first(BootclasspathHook.ACTION_NAME, self.bootclasspath_hook)

    @staticmethod
    def _configure_java_base(
        project: Project, errorprone_configuration: DependencyConfiguration
    ) -> None:
        def configure(source_set: SourceSet) -> None:
            annotation_processor = source_set.annotation_processor_configuration_name
            project.configurations[annotation_processor].extends_from(errorprone_configuration)
            project.tasks.configure_named(
                source_set.compile_java_task_name,
                lambda task: errorprone_options(task).enabled.by_convention(True),
            )

        source_sets: SourceSetContainer = project.extensions.get_by_name("source_sets")
        source_sets.configure_each(configure)

    @staticmethod
    def _configure_java(project: Project) -> None:
        project.tasks.configure_named(
            COMPILE_TEST_JAVA_TASK_NAME,
            lambda task: errorprone_options(task).is_compiling_test_only_code.by_convention(True),
        )

    @staticmethod
    def _configure_android(
        project: Project, errorprone_configuration: DependencyConfiguration
    ) -> None:
        android: AndroidExtension = project.extensions.get_by_name(ANDROID_EXTENSION_NAME)
        android.variants.configure_each(
            lambda variant: configure_variant(variant, errorprone_configuration, project.tasks)
        )
