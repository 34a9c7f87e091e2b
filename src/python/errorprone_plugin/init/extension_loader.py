# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import importlib
import logging
import traceback
from typing import Iterable

from errorprone_plugin.base.exceptions import BackendConfigurationError
from errorprone_plugin.build.plugins import PluginRegistry

logger = logging.getLogger(__name__)

DEFAULT_BACKENDS = (
    "errorprone_plugin.build",
    "errorprone_plugin.android",
    "errorprone_plugin.errorprone",
)


def load_default_backends() -> PluginRegistry:
    return load_backends(DEFAULT_BACKENDS)


def load_backends(
    backends: Iterable[str], registry: PluginRegistry | None = None
) -> PluginRegistry:
    """Loads the plugins of the given backend packages, in order.

    :param backends: packages each holding a `register` module.
    :param registry: the registry to add plugins to; a new one by default.
    :raises: :class:`errorprone_plugin.base.exceptions.BackendConfigurationError` if there is a
      problem loading a backend.
    """
    registry = registry or PluginRegistry()
    for backend_package in dict.fromkeys(backends):
        load_backend(registry, backend_package)
    return registry


def load_backend(registry: PluginRegistry, backend_package: str) -> None:
    """Registers the plugins of the given backend package.

    The package's `register` module must define a zero-arg `plugins` callable returning a mapping
    of plugin id to plugin factory.
    """
    backend_module = backend_package + ".register"
    try:
        module = importlib.import_module(backend_module)
    except ImportError as ex:
        traceback.print_exc()
        raise BackendConfigurationError(f"Failed to load the {backend_module} backend: {ex!r}")

    entrypoint = getattr(module, "plugins", None)
    if entrypoint is None:
        raise BackendConfigurationError(f"Backend {backend_module} has no `plugins` entrypoint.")
    try:
        plugins = entrypoint()
    except TypeError as e:
        traceback.print_exc()
        raise BackendConfigurationError(
            f"Entrypoint plugins in {backend_module} must be a zero-arg callable: {e!r}"
        )
    for plugin_id, factory in plugins.items():
        logger.debug(f"Registering plugin {plugin_id} from backend {backend_package}")
        registry.register(plugin_id, factory)
