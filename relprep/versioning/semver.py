"""Semantic version value type used by version.json.

Versions are ``major.minor[.build[.revision]][-prerelease][+metadata]``. The
numeric part keeps track of how many segments were written, because that
count is meaningful: ``1.2`` and ``1.2.0`` render different branch names and
only the latter can take a ``build`` increment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from functools import total_ordering

__all__ = [
    "Position",
    "SemanticVersion",
    "VersionIncrement",
    "parse_version",
]

_VERSION_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:\.(0|[1-9]\d*))?"
    r"(?:-([0-9A-Za-z\-{}]+(?:\.[0-9A-Za-z\-{}]+)*))?"
    r"(?:\+([0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)

_MISSING = -1


class Position(IntEnum):
    """Positions within a version, highest order first."""

    MAJOR = 0
    MINOR = 1
    BUILD = 2
    REVISION = 3
    PRERELEASE = 4

    def __str__(self) -> str:
        return self.name.lower()


class VersionIncrement(str, Enum):
    """Numeric segment advanced on the development branch after a fork."""

    MAJOR = "major"
    MINOR = "minor"
    BUILD = "build"

    def __str__(self) -> str:
        return self.value


def _prerelease_key(prerelease: str) -> tuple[tuple[int, int, str], ...]:
    key: list[tuple[int, int, str]] = []
    for ident in prerelease.split("."):
        if ident.isdigit():
            key.append((0, int(ident), ""))
        else:
            key.append((1, 0, ident))
    return tuple(key)


@total_ordering
@dataclass(frozen=True, slots=True, eq=True)
class SemanticVersion:
    """An immutable semantic version.

    Attributes:
        major: Major segment.
        minor: Minor segment.
        build: Third segment, None when the version only has two.
        revision: Fourth segment, None when absent.
        prerelease: Prerelease tag without the leading ``-`` ("" when stable).
        build_metadata: Build metadata without the leading ``+``.
    """

    major: int
    minor: int
    build: int | None = None
    revision: int | None = None
    prerelease: str = ""
    build_metadata: str = ""

    def __post_init__(self) -> None:
        if self.revision is not None and self.build is None:
            raise ValueError("a version with a revision segment must also have a build segment")
        for segment in self.numeric:
            if segment < 0:
                raise ValueError(f"negative version segment in {self.numeric!r}")

    @property
    def numeric(self) -> tuple[int, ...]:
        """The numeric segments that are present."""
        segments = [self.major, self.minor]
        if self.build is not None:
            segments.append(self.build)
            if self.revision is not None:
                segments.append(self.revision)
        return tuple(segments)

    @property
    def numeric_key(self) -> tuple[int, int, int, int]:
        """Numeric segments padded to four; missing segments sort below zero."""
        return (
            self.major,
            self.minor,
            _MISSING if self.build is None else self.build,
            _MISSING if self.revision is None else self.revision,
        )

    @property
    def numeric_text(self) -> str:
        return ".".join(str(s) for s in self.numeric)

    def segment(self, position: Position) -> int:
        """Read a numeric segment, -1 when not specified."""
        if position is Position.PRERELEASE:
            raise ValueError("prerelease is not a numeric segment")
        return self.numeric_key[position]

    def _sort_key(self) -> tuple[object, ...]:
        if not self.prerelease:
            return (self.numeric_key, (1,))
        return (self.numeric_key, (0, _prerelease_key(self.prerelease)))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        text = self.numeric_text
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build_metadata:
            text += f"+{self.build_metadata}"
        return text


def parse_version(text: str) -> SemanticVersion:
    """Parse a version string.

    Raises:
        ValueError: If ``text`` is not a valid version.
    """
    m = _VERSION_RE.match(text.strip())
    if m is None:
        raise ValueError(f"invalid version: {text!r}")
    major, minor, build, revision, prerelease, metadata = m.groups()
    return SemanticVersion(
        major=int(major),
        minor=int(minor),
        build=None if build is None else int(build),
        revision=None if revision is None else int(revision),
        prerelease=prerelease or "",
        build_metadata=metadata or "",
    )
