# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations


def assert_logged(caplog, expect_logged: list[tuple[int, str]] | None = None) -> None:
    """Asserts the captured records match, in order, the given (level, message fragment) pairs."""
    if not expect_logged:
        assert not caplog.records
        return

    assert len(caplog.records) == len(
        expect_logged
    ), f"Expected {len(expect_logged)} records, but got {len(caplog.records)}."
    for idx, (lvl, msg) in enumerate(expect_logged):
        log_record = caplog.records[idx]
        assert (
            msg in log_record.message
        ), f"The text {msg!r} was not found in {log_record.message!r}."
        assert (
            lvl == log_record.levelno
        ), f"Expected level {lvl}, but got level {log_record.levelno}."
