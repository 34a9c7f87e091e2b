# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import sys
from logging import Formatter, LogRecord, StreamHandler
from typing import Mapping, TextIO

from colors import red, yellow

from errorprone_plugin.util.logging import LogLevel

# Although logging supports the WARN level, its not documented and could conceivably be yanked.
# Config files say 'warn', so explicitly setup a 'WARN' logging level name that maps to 'WARNING'.
logging.addLevelName(logging.WARNING, "WARN")

_ROOT_LOGGER_NAME = "errorprone_plugin"


class _LevelColoringFormatter(Formatter):
    """Prefixes each record with its level name, coloured for warnings and errors."""

    def __init__(self, *, use_color: bool) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: LogRecord) -> str:
        message = super().format(record)
        prefix = f"[{record.levelname}]"
        if self.use_color:
            if record.levelno >= logging.ERROR:
                prefix = red(prefix)
            elif record.levelno >= logging.WARNING:
                prefix = yellow(prefix)
        return f"{prefix} {message}"


def initialize_logging(
    level: LogLevel = LogLevel.INFO,
    log_levels_by_target: Mapping[str, LogLevel] | None = None,
    *,
    use_color: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Installs a stream handler for the plugin's loggers and returns it.

    Re-initializing replaces the handler installed by a previous call.

    :param level: the level for the plugin's loggers.
    :param log_levels_by_target: per-logger level overrides, keyed by logger name.
    :param use_color: colour level prefixes; `None` means colour only when `stream` is a TTY.
    :param stream: where to write; defaults to `sys.stderr`.
    """
    stream = stream or sys.stderr
    if use_color is None:
        use_color = stream.isatty()

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in tuple(logger.handlers):
        if getattr(handler, "_errorprone_plugin_handler", False):
            logger.removeHandler(handler)

    handler = StreamHandler(stream)
    handler.setFormatter(_LevelColoringFormatter(use_color=use_color))
    setattr(handler, "_errorprone_plugin_handler", True)
    logger.addHandler(handler)
    level.set_level_for(logger)

    for logger_name, target_level in (log_levels_by_target or {}).items():
        target_level.set_level_for(logging.getLogger(logger_name))

    return handler
