# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterator

from errorprone_plugin.base.exceptions import BuildConfigurationError
from errorprone_plugin.build.configuration import DependencyConfiguration

logger = logging.getLogger(__name__)


class VariantKind(Enum):
    """What an Android variant builds; test variants compile test-only code."""

    APPLICATION = ("application", False)
    LIBRARY = ("library", False)
    FEATURE = ("feature", False)
    TEST_APPLICATION = ("test application", False)
    INSTANT_APP = ("instant app", False)
    ANDROID_TEST = ("android test", True)
    UNIT_TEST = ("unit test", True)

    _is_test_only: bool

    def __new__(cls, value: str, is_test_only: bool) -> VariantKind:
        member: VariantKind = object.__new__(cls)
        member._value_ = value
        member._is_test_only = is_test_only
        return member

    @property
    def is_test_only(self) -> bool:
        return self._is_test_only


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


class Variant:
    """A build type and product flavor combination, or a test of one."""

    def __init__(
        self,
        name: str,
        kind: VariantKind,
        annotation_processor_configuration: DependencyConfiguration,
        *,
        build_type: str,
        flavors: tuple[str, ...] = (),
        tested_variant: Variant | None = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.annotation_processor_configuration = annotation_processor_configuration
        self.build_type = build_type
        self.flavors = flavors
        self.tested_variant = tested_variant

    @property
    def java_compile_task_name(self) -> str:
        return f"compile{capitalize(self.name)}JavaWithJavac"

    def __repr__(self) -> str:
        return f"Variant({self.name!r}, {self.kind.name})"


class VariantContainer:
    """The variants of an Android project; `configure_each` also applies to variants added later."""

    def __init__(self) -> None:
        self._variants: dict[str, Variant] = {}
        self._actions: list[Callable[[Variant], None]] = []

    def add(self, variant: Variant) -> None:
        if variant.name in self._variants:
            raise BuildConfigurationError(f"Variant '{variant.name}' already exists.")
        self._variants[variant.name] = variant
        logger.debug(f"Added {variant}")
        for action in list(self._actions):
            action(variant)

    def configure_each(self, action: Callable[[Variant], None]) -> None:
        self._actions.append(action)
        for variant in list(self._variants.values()):
            action(variant)

    def __getitem__(self, name: str) -> Variant:
        try:
            return self._variants[name]
        except KeyError:
            raise BuildConfigurationError(f"Variant '{name}' not found.")

    def __contains__(self, name: object) -> bool:
        return name in self._variants

    def __iter__(self) -> Iterator[Variant]:
        return iter(list(self._variants.values()))

    def __len__(self) -> int:
        return len(self._variants)
