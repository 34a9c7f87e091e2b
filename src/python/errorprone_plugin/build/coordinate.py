# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).
from __future__ import annotations

import os
import re
from dataclasses import dataclass


class InvalidCoordinateString(Exception):
    """The coordinate string being passed is invalid or malformed."""

    def __init__(self, coords: str) -> None:
        super().__init__(f"Received invalid artifact coordinates: {coords}")


@dataclass(frozen=True, order=True)
class Coordinate:
    """A single Maven-style coordinate for a JVM dependency.

    Parsed from and rendered to `group:artifact[:packaging[:classifier]]:version`, which is also
    the form accepted by `coursier fetch`.
    """

    REGEX = re.compile("([^: ]+):([^: ]+)(:([^: ]*)(:([^: ]+))?)?:([^: ]+)")

    group: str
    artifact: str
    version: str
    packaging: str = "jar"
    classifier: str | None = None

    @classmethod
    def from_coord_str(cls, s: str) -> Coordinate:
        """Parses from a coordinate string with optional `packaging` and `classifier` coordinates.

        ${organisation}:${artifact}[:${packaging}[:${classifier}]]:${version}
        """
        parts = Coordinate.REGEX.fullmatch(s)
        if parts is None:
            raise InvalidCoordinateString(s)
        packaging_part = parts.group(4)
        return cls(
            group=parts.group(1),
            artifact=parts.group(2),
            packaging=packaging_part if packaging_part else "jar",
            classifier=parts.group(6),
            version=parts.group(7),
        )

    def to_coord_str(self, versioned: bool = True) -> str:
        unversioned = f"{self.group}:{self.artifact}"
        if self.classifier is not None:
            unversioned += f":{self.packaging}:{self.classifier}"
        elif self.packaging != "jar":
            unversioned += f":{self.packaging}"
        return f"{unversioned}:{self.version}" if versioned else unversioned

    def matches(self, group: str | None = None, module: str | None = None) -> bool:
        """Whether this coordinate is selected by an exclusion rule; `None` matches anything."""
        return (group is None or group == self.group) and (
            module is None or module == self.artifact
        )

    @property
    def file_name(self) -> str:
        classifier = f"-{self.classifier}" if self.classifier else ""
        return f"{self.artifact}-{self.version}{classifier}.{self.packaging}"

    def repository_path(self, root: str) -> str:
        """The path of the artifact in a Maven-layout repository rooted at `root`."""
        return os.path.join(
            root, *self.group.split("."), self.artifact, self.version, self.file_name
        )

    def __str__(self) -> str:
        return self.to_coord_str()
