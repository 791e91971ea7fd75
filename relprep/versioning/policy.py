"""Typed model of the version.json policy file."""

from __future__ import annotations

from dataclasses import dataclass, field

from relprep.versioning.semver import Position, SemanticVersion, VersionIncrement

__all__ = [
    "DEFAULT_BRANCH_NAME",
    "DEFAULT_FIRST_UNSTABLE_TAG",
    "DEFAULT_VERSION_INCREMENT",
    "ReleaseOptions",
    "VersioningPolicy",
]

DEFAULT_BRANCH_NAME = "v{version}"
DEFAULT_VERSION_INCREMENT = VersionIncrement.MINOR
DEFAULT_FIRST_UNSTABLE_TAG = "alpha"

HEIGHT_MACRO = "{height}"


def _empty_extra() -> dict[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """The ``release`` section of version.json.

    Attributes:
        branch_name: Release branch template, must contain ``{version}``.
        version_increment: Segment advanced on the development branch.
        first_unstable_tag: Prerelease tag applied to the next dev version.
        extra: Other keys of the section, written back untouched.
    """

    branch_name: str = DEFAULT_BRANCH_NAME
    version_increment: VersionIncrement = DEFAULT_VERSION_INCREMENT
    first_unstable_tag: str = DEFAULT_FIRST_UNSTABLE_TAG
    extra: dict[str, object] = field(default_factory=_empty_extra)


@dataclass(frozen=True, slots=True)
class VersioningPolicy:
    """Versioning policy of one branch.

    Attributes:
        version: The version written in the file.
        release: Release options.
        version_height_offset: Offset added to the computed version height.
        extra: Other top-level keys, written back untouched.
    """

    version: SemanticVersion
    release: ReleaseOptions = field(default_factory=ReleaseOptions)
    version_height_offset: int | None = None
    extra: dict[str, object] = field(default_factory=_empty_extra)

    @property
    def version_height_position(self) -> Position | None:
        """Where the version height lands in the computed version.

        A ``{height}`` macro in the prerelease wins; otherwise it is the first
        numeric segment the file leaves unspecified.
        """
        if HEIGHT_MACRO in self.version.prerelease:
            return Position.PRERELEASE
        if self.version.build is None:
            return Position.BUILD
        if self.version.revision is None:
            return Position.REVISION
        return None
