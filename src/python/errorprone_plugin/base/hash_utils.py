# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import hashlib
import json
import logging
import typing
from collections.abc import Iterable, Mapping, Set
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


def hash_all(strs: typing.Iterable[bytes | str]) -> str:
    """Returns a hash of the concatenation of all the strings in strs using sha1."""
    digest = hashlib.sha1()
    for s in strs:
        if isinstance(s, str):
            s = s.encode("utf-8")
        digest.update(s)
    return digest.hexdigest()


class InputsEncoder(json.JSONEncoder):
    """An encoder for task inputs.

    Unlike a plain `json.dumps`, mapping order is significant: compiler arguments rendered from an
    ordered mapping change meaning when reordered, so mappings are encoded as lists of pairs in
    iteration order. Sets have no meaningful order and are sorted.
    """

    def default(self, o):
        if isinstance(o, (type(None), bool, int, float, str)):
            return o
        if isinstance(o, bytes):
            return o.decode("utf-8")
        if isinstance(o, Enum):
            return o.value
        if hasattr(o, "as_inputs"):
            return self.default(o.as_inputs())
        if isinstance(o, Mapping):
            return [[self.default(k), self.default(v)] for k, v in o.items()]
        if isinstance(o, Set):
            return sorted(self.default(i) for i in o)
        if isinstance(o, Iterable):
            return [self.default(i) for i in o]
        raise TypeError(f"{type(self).__name__} cannot encode {type(o).__name__}: {o!r}")

    def encode(self, o):
        return super().encode(self.default(o))


def json_hash(obj: Any, encoder: type[json.JSONEncoder] = InputsEncoder) -> str:
    """Hashes `obj` by dumping to JSON."""
    json_str = json.dumps(obj, ensure_ascii=True, allow_nan=False, cls=encoder)
    return hash_all([json_str])
