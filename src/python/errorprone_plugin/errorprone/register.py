# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Runs Error Prone as part of Java compilation.

See https://errorprone.info for the checks and their flags.
"""

from __future__ import annotations

from errorprone_plugin.build.plugins import PluginFactory
from errorprone_plugin.errorprone.plugin import ErrorPronePlugin


def plugins() -> dict[str, PluginFactory]:
    return {ErrorPronePlugin.PLUGIN_ID: ErrorPronePlugin}
