# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Android plugins: `com.android.application`, `com.android.library` and friends."""

from __future__ import annotations

from functools import partial

from errorprone_plugin.android.plugin import AndroidPlugin, AndroidPluginKind
from errorprone_plugin.build.plugins import PluginFactory


def plugins() -> dict[str, PluginFactory]:
    return {kind.plugin_id: partial(AndroidPlugin, kind) for kind in AndroidPluginKind}
