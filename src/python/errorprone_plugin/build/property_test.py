# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

import pytest

from errorprone_plugin.build.property import MissingValueError, Property
from errorprone_plugin.option.ranked_value import Rank


def test_unset() -> None:
    prop: Property[bool] = Property("enabled")
    assert not prop.is_present
    assert prop.rank is Rank.NONE
    assert prop.get_or_else(False) is False
    with pytest.raises(MissingValueError, match="enabled"):
        prop.get()


def test_convention_applies_when_unset() -> None:
    prop: Property[bool] = Property("enabled")
    assert prop.by_convention(True)
    assert prop.get() is True
    assert prop.rank is Rank.CONVENTION


def test_explicit_overrides_convention() -> None:
    prop: Property[bool] = Property("enabled")
    prop.by_convention(True)
    prop.set(False)
    assert prop.get() is False
    assert prop.rank is Rank.EXPLICIT


def test_convention_is_noop_once_explicit() -> None:
    prop: Property[bool] = Property("enabled")
    prop.set(False)
    assert not prop.by_convention(True)
    assert prop.get() is False


def test_later_convention_replaces_earlier_convention() -> None:
    prop: Property[str] = Property("excluded_paths")
    prop.by_convention(".*/gen/.*")
    prop.by_convention(".*/build/.*")
    assert prop.get() == ".*/build/.*"


def test_config_sits_between_convention_and_explicit() -> None:
    prop: Property[bool] = Property("enabled")
    prop.set_from_config(False, "errorprone.toml")
    assert not prop.by_convention(True)
    assert prop.get() is False
    assert prop.details == "errorprone.toml"
    prop.set(True)
    assert not prop.set_from_config(False)
    assert prop.get() is True


def test_set_none_clears() -> None:
    prop: Property[bool] = Property("enabled")
    prop.set(True)
    prop.set(None)
    assert not prop.is_present
    assert prop.by_convention(False)
