# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).
from __future__ import annotations

import logging
from textwrap import dedent

import pytest

from errorprone_plugin.option.config import Config, FileContent
from errorprone_plugin.option.errors import (
    ConfigError,
    ConfigValidationError,
    InterpolationMissingOptionError,
)
from errorprone_plugin.testutil.pytest_util import assert_logged

FILE_0 = FileContent(
    "errorprone.toml",
    dedent(
        """
        [DEFAULT]
        javac_version = "9+181-r4173-1"
        generated = "%(buildroot)s/build/generated"

        [GLOBAL]
        level = "warn"

        [errorprone]
        enabled = true
        excluded_paths = "%(generated)s/.*"
        checks = { ArrayEquals = "OFF", MissingOverride = "ERROR" }

        [errorprone.tasks.compileTestJava]
        is_compiling_test_only_code = true

        [dependencies]
        errorproneJavac = ["com.google.errorprone:javac:%(javac_version)s"]
        """
    ).encode(),
)

FILE_1 = FileContent(
    "errorprone.ci.toml",
    dedent(
        """
        [errorprone]
        enabled = false

        [errorprone.tasks.compileJava]
        args = ["-XepDisableWarningsInGeneratedCode"]
        """
    ).encode(),
)

VALID_SECTIONS = {
    "GLOBAL": {"level"},
    "errorprone": {"enabled", "excluded_paths", "checks", "args"},
    "errorprone.tasks.*": {"enabled", "is_compiling_test_only_code", "args"},
    "dependencies": {"errorprone", "errorproneJavac"},
}


@pytest.fixture
def config() -> Config:
    return Config.load([FILE_0, FILE_1], seed_values={"buildroot": "/repo"})


def test_get_returns_values_from_each_file(config: Config) -> None:
    assert config.get("errorprone", "enabled") == [True, False]
    assert config.get_value("errorprone", "enabled") is False
    assert config.get_source_for_option("errorprone", "enabled") == "errorprone.ci.toml"
    assert config.get_value("errorprone", "missing", "fallback") == "fallback"
    assert config.sources() == ["errorprone.toml", "errorprone.ci.toml"]


def test_interpolation(config: Config) -> None:
    assert config.get_value("errorprone", "excluded_paths") == "/repo/build/generated/.*"
    assert config.get_value("dependencies", "errorproneJavac") == [
        "com.google.errorprone:javac:9+181-r4173-1"
    ]


def test_dict_values_keep_order(config: Config) -> None:
    assert list(config.get_value("errorprone", "checks").items()) == [
        ("ArrayEquals", "OFF"),
        ("MissingOverride", "ERROR"),
    ]


def test_nested_sections(config: Config) -> None:
    assert config.subsections("errorprone.tasks") == ["compileTestJava", "compileJava"]
    assert config.get_value("errorprone.tasks.compileTestJava", "is_compiling_test_only_code")
    assert config.get_value("errorprone.tasks.compileJava", "args") == [
        "-XepDisableWarningsInGeneratedCode"
    ]
    assert config.subsections("nonexistent") == []


def test_verify_accepts_known_entries(config: Config) -> None:
    config.verify(VALID_SECTIONS)


def test_verify_rejects_unknown_entries(caplog) -> None:
    bad = FileContent(
        "bad.toml",
        dedent(
            """
            [errorprone]
            enabeld = true

            [errorprone.tasks.compileJava]
            chekcs = {}

            [mystery]
            x = 1
            """
        ).encode(),
    )
    with pytest.raises(ConfigValidationError):
        Config.load([bad]).verify(VALID_SECTIONS)
    assert_logged(
        caplog,
        [
            (logging.ERROR, "Invalid option 'chekcs' under [errorprone.tasks.compileJava]"),
            (logging.ERROR, "Invalid option 'enabeld' under [errorprone] in bad.toml"),
            (logging.ERROR, "Invalid section [mystery] in bad.toml"),
        ],
    )


def test_missing_interpolation() -> None:
    config = Config.load([FileContent("a.toml", b'[errorprone]\nexcluded_paths = "%(nope)s"\n')])
    with pytest.raises(InterpolationMissingOptionError, match="nope"):
        config.get_value("errorprone", "excluded_paths")


def test_invalid_toml() -> None:
    with pytest.raises(ConfigError, match="could not be parsed as TOML"):
        Config.load([FileContent("a.toml", b"[errorprone\n")])


def test_load_files(tmp_path) -> None:
    path = tmp_path / "errorprone.toml"
    path.write_text("[errorprone]\nenabled = true\n")
    assert Config.load_files([str(path)]).get_value("errorprone", "enabled") is True
    with pytest.raises(ConfigError, match="could not be read"):
        Config.load_files([str(tmp_path / "missing.toml")])
