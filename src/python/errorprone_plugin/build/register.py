# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Core build model plugins.

See the `extension_loader` for how backends are loaded.
"""

from __future__ import annotations

from errorprone_plugin.build.java_plugin import JavaBasePlugin, JavaPlugin
from errorprone_plugin.build.plugins import PluginFactory


def plugins() -> dict[str, PluginFactory]:
    return {
        JavaBasePlugin.PLUGIN_ID: JavaBasePlugin,
        JavaPlugin.PLUGIN_ID: JavaPlugin,
    }
