# Copyright 2026 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import threading
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JavaVersion:
    """A Java feature release, e.g. 8 for `1.8.0_292` and 11 for `11.0.2`."""

    major: int
    raw: str = ""

    _VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?")

    @classmethod
    def parse(cls, version: str) -> JavaVersion:
        # Java version strings before 9 used a `1.` prefix: `1.8.0_292` is Java 8.
        match = cls._VERSION_RE.match(version.strip())
        if not match:
            raise ValueError(f"Not a Java version: {version!r}")
        major = int(match.group(1))
        if major == 1 and match.group(2) is not None:
            major = int(match.group(2))
        return cls(major, version.strip())

    @property
    def is_java8(self) -> bool:
        return self.major == 8

    def __str__(self) -> str:
        return self.raw or str(self.major)


VERSION_REGEX = re.compile(r"version \"(.+?)\"")


def parse_java_version_output(version_lines: str) -> JavaVersion | None:
    """Extracts the version from the output of `java -version`."""
    for line in version_lines.splitlines():
        m = VERSION_REGEX.search(line)
        if m:
            return JavaVersion.parse(m[1])
    return None


class Distribution:
    """Represents a java distribution installed on the local system.

    Provides access to the distribution's binaries, i.e. `java` and `javac`, and its version.
    """

    class Error(Exception):
        """Indicates an invalid java distribution."""

    @staticmethod
    def _is_executable(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)

    def __init__(self, home_path: str | None = None, bin_path: str | None = None) -> None:
        """Creates a distribution wrapping the given `home_path` or `bin_path`.

        Only one of `home_path` or `bin_path` should be supplied.
        """
        if home_path and not os.path.isdir(home_path):
            raise ValueError(f"The specified java home path is invalid: {home_path}")
        if bin_path and not os.path.isdir(bin_path):
            raise ValueError(f"The specified binary path is invalid: {bin_path}")
        if not bool(home_path) ^ bool(bin_path):
            raise ValueError(
                "Exactly one of home path or bin path should be supplied, given: "
                f"home_path={home_path} bin_path={bin_path}"
            )
        self._home = home_path
        self._bin_path = bin_path or os.path.join(home_path, "bin")  # type: ignore[arg-type]
        self._lock = threading.Lock()
        self._version: JavaVersion | None = None

    @classmethod
    def locate(cls, env: Mapping[str, str] | None = None) -> Distribution:
        """Finds the distribution named by `JAVA_HOME`, or else the one providing `java` on PATH."""
        env = os.environ if env is None else env
        java_home = env.get("JAVA_HOME")
        if java_home and os.path.isdir(java_home):
            return cls(home_path=java_home)
        java = shutil.which("java", path=env.get("PATH"))
        if java:
            return cls(bin_path=os.path.dirname(os.path.realpath(java)))
        raise cls.Error("Failed to locate a java distribution: set JAVA_HOME or put java on PATH.")

    @property
    def home(self) -> str | None:
        return self._home

    @property
    def java(self) -> str:
        return self.binary("java")

    @property
    def javac(self) -> str:
        return self.binary("javac")

    def binary(self, name: str) -> str:
        """Returns the path to the command of the given name for this distribution.

        If this distribution has no valid command of the given name raises Distribution.Error.
        """
        path = os.path.join(self._bin_path, name)
        if not self._is_executable(path):
            raise self.Error(f"Failed to locate the {name} executable in {self._bin_path}")
        return path

    @property
    def version(self) -> JavaVersion:
        """Returns the distribution version, running `java -version` the first time."""
        with self._lock:
            if self._version is None:
                self._version = self._get_version(self.java)
            return self._version

    def _get_version(self, java: str) -> JavaVersion:
        try:
            result = subprocess.run(
                [java, "-version"], stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
            )
        except OSError as e:
            raise self.Error(f"Failed to run {java}: {e}")
        version = parse_java_version_output(result.stdout)
        if version is None:
            raise self.Error(f"Could not determine the version of {java} from:\n{result.stdout}")
        logger.debug(f"{java} is Java {version}")
        return version

    def __repr__(self) -> str:
        return f"Distribution({self._home or self._bin_path!r})"
