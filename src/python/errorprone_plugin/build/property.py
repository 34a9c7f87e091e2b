# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from typing import Generic, TypeVar

from errorprone_plugin.option.ranked_value import NO_VALUE, Rank, RankedValue

T = TypeVar("T")


class MissingValueError(ValueError):
    """Raised when reading a property that has no value."""


class Property(Generic[T]):
    """A configurable value distinguishing conventions from explicitly set values.

    A convention only applies while nothing of a higher rank has been set; an explicit `set` always
    wins and may happen any time before the value is read.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._ranked_value: RankedValue[T] = NO_VALUE

    @property
    def name(self) -> str:
        return self._name

    @property
    def rank(self) -> Rank:
        return self._ranked_value.rank

    @property
    def details(self) -> str | None:
        return self._ranked_value.details

    @property
    def is_present(self) -> bool:
        return self._ranked_value.rank is not Rank.NONE

    def _offer(self, rank: Rank, value: T | None, details: str | None) -> bool:
        if not self._ranked_value.overridden_by(rank):
            return False
        if value is None:
            self._ranked_value = NO_VALUE
        else:
            self._ranked_value = RankedValue(rank, value, details)
        return True

    def set(self, value: T | None) -> None:
        """Explicitly sets the value; `None` clears it, conventions included."""
        self._ranked_value = NO_VALUE if value is None else RankedValue(Rank.EXPLICIT, value)

    def by_convention(self, value: T) -> bool:
        """Sets the value unless one was already set from config or explicitly.

        Returns whether the convention took effect.
        """
        return self._offer(Rank.CONVENTION, value, None)

    def set_from_config(self, value: T, source: str | None = None) -> bool:
        """Sets the value unless one was explicitly set; `source` names the config file."""
        return self._offer(Rank.CONFIG, value, source)

    def get(self) -> T:
        if not self.is_present:
            raise MissingValueError(f"No value has been specified for property '{self._name}'.")
        return self._ranked_value.value  # type: ignore[return-value]

    def get_or_else(self, default: T) -> T:
        if not self.is_present:
            return default
        return self._ranked_value.value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Property({self._name}={self._ranked_value.value!r}, rank={self.rank.value})"
