# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

import pytest


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    outcome = yield
    rep = outcome.get_result()

    # With --noskip, JDK tests skipped for lack of a javac or Error Prone classpath fail instead.
    if (
        item.config.getoption("--noskip")
        and rep.skipped
        and call.excinfo is not None
        and call.excinfo.errisinstance(pytest.skip.Exception)
        and "no_error_if_skipped" not in item.keywords
    ):
        rep.outcome = "failed"
        rep.longrepr = f"Forbidden skipped test - {call.excinfo.value}"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "no_error_if_skipped: Don't error if this test is skipped when using --noskip"
    )


def pytest_addoption(parser):
    parser.addoption(
        "--noskip",
        action="store_true",
        default=False,
        help="Treat skipped tests, such as JDK tests missing ERRORPRONE_CLASSPATH, as errors",
    )
