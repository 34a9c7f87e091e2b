# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import os
from typing import Any

from packaging.version import Version as _Version


# Simple derived class to enable comparison with strings in config files and build scripts.
class Version(_Version):
    def __hash__(self):
        return super().__hash__()

    def __eq__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__eq__(other)

    def __ne__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__ne__(other)

    def __lt__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__lt__(other)

    def __le__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__le__(other)

    def __gt__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__gt__(other)

    def __ge__(self, other: Any):
        if isinstance(other, str):
            other = Version(other)
        return super().__ge__(other)


# Set this env var to override the version the plugin reports. Useful for testing.
_ERRORPRONE_PLUGIN_VERSION_OVERRIDE = "_ERRORPRONE_PLUGIN_VERSION_OVERRIDE"

VERSION: str = os.environ.get(_ERRORPRONE_PLUGIN_VERSION_OVERRIDE) or "0.8.0"

# The version of the build model API (`errorprone_plugin.build`) plugins are applied against.
HOST_API_VERSION = Version("5.1")
