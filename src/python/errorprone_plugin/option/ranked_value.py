# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@total_ordering
class Rank(Enum):
    # The ranked value sources. Higher ranks override lower ones.
    NONE = (0, "NONE")  # No value.
    CONVENTION = (1, "CONVENTION")  # A default applied by a plugin.
    CONFIG = (2, "CONFIG")  # The value from a config file.
    EXPLICIT = (3, "EXPLICIT")  # The value set by the build author.

    _rank: int

    def __new__(cls, rank: int, display: str) -> "Rank":
        member: "Rank" = object.__new__(cls)
        member._value_ = display
        member._rank = rank
        return member

    def __lt__(self, other: Any) -> Union["NotImplemented", bool]:
        if type(other) != Rank:
            return NotImplemented
        return self._rank < other._rank


@dataclass(frozen=True)
class RankedValue(Generic[T]):
    """A value, together with a rank inferred from its source.

    Allows us to control which source wins. A plugin marks compile tasks of test code as compiling
    test-only code *by convention*; a config file may override that for every task, and a build
    script may override both:

      [errorprone]
      is_compiling_test_only_code = false

      tasks.named("compileTestJava").errorprone.is_compiling_test_only_code.set(True)

    To tell these cases apart we need to know the "ranking" of the value.
    """

    rank: Rank
    value: Optional[T]
    details: Optional[str] = None  # Optional details about the derivation of the value.

    def overridden_by(self, rank: Rank) -> bool:
        """Whether a value of the given rank replaces this one.

        Equal ranks replace each other, so the last explicit set (or the last convention) wins.
        """
        return rank >= self.rank


NO_VALUE: RankedValue[Any] = RankedValue(Rank.NONE, None)
