# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from errorprone_plugin.android.variants import Variant
from errorprone_plugin.build.configuration import DependencyConfiguration
from errorprone_plugin.build.java_compile import JavaCompile
from errorprone_plugin.build.tasks import TaskContainer
from errorprone_plugin.errorprone.options import ErrorProneOptions


def configure_variant(
    variant: Variant, errorprone_configuration: DependencyConfiguration, tasks: TaskContainer
) -> None:
    """Enables Error Prone, by convention, for the variant's Java compilation.

    Test variants are also marked as compiling test-only code.
    """
    variant.annotation_processor_configuration.extends_from(errorprone_configuration)

    def configure(task: JavaCompile) -> None:
        options: ErrorProneOptions = task.options.extensions.get_by_name(ErrorProneOptions.NAME)
        options.enabled.by_convention(True)
        if variant.kind.is_test_only:
            options.is_compiling_test_only_code.by_convention(True)

    tasks.configure_named(variant.java_compile_task_name, configure)
