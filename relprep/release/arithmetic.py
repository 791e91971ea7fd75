"""Version arithmetic for release preparation.

All functions are pure: they take SemanticVersion values and return new ones.
"""

from __future__ import annotations

from dataclasses import replace

from relprep.core.result import Err, Ok, Result
from relprep.release.errors import ReleasePreparationError
from relprep.versioning.semver import Position, SemanticVersion, VersionIncrement

__all__ = [
    "increment",
    "is_decrement",
    "set_first_prerelease",
    "strip_prerelease",
    "will_reset_version_height",
]


def strip_prerelease(version: SemanticVersion) -> SemanticVersion:
    return replace(version, prerelease="")


def set_first_prerelease(version: SemanticVersion, tag: str | None) -> SemanticVersion:
    """Replace the first prerelease identifier with ``tag``.

    The leading ``-`` of ``tag`` is optional. Identifiers after the first one
    (for example a ``{height}`` macro) are kept. An empty tag removes the whole
    prerelease.
    """
    first = (tag or "").lstrip("-")
    if not first:
        return strip_prerelease(version)
    _, sep, rest = version.prerelease.partition(".")
    return replace(version, prerelease=f"{first}{sep}{rest}" if rest else first)


def is_decrement(old: SemanticVersion, new: SemanticVersion) -> bool:
    """True when moving from ``old`` to ``new`` would go backwards.

    A stable version is never replaced by a prerelease of the same number.
    Prerelease tags of equal numeric versions are not otherwise compared.
    """
    if new.numeric_key > old.numeric_key:
        return False
    if new.numeric_key == old.numeric_key:
        return not old.prerelease and bool(new.prerelease)
    return True


def will_reset_version_height(
    old: SemanticVersion, new: SemanticVersion, height_position: Position
) -> bool:
    """True when the change clears an accumulated version height.

    The height counts commits since the version-defining segments last
    changed; those are every segment from major down to ``height_position``.
    """
    if old == new:
        return False
    if height_position is Position.PRERELEASE:
        return True
    for position in Position:
        if position > height_position:
            break
        if old.segment(position) != new.segment(position):
            return True
    return False


def increment(
    version: SemanticVersion, kind: VersionIncrement
) -> Result[SemanticVersion, ReleasePreparationError]:
    """Advance one numeric segment and zero the lower ones.

    The number of segments and the prerelease/metadata of ``version`` are
    preserved. ``build`` needs a version that already has a build segment.
    """

    def zero(segment: int | None) -> int | None:
        return None if segment is None else 0

    match kind:
        case VersionIncrement.MAJOR:
            bumped = replace(
                version,
                major=version.major + 1,
                minor=0,
                build=zero(version.build),
                revision=zero(version.revision),
            )
        case VersionIncrement.MINOR:
            bumped = replace(
                version,
                minor=version.minor + 1,
                build=zero(version.build),
                revision=zero(version.revision),
            )
        case VersionIncrement.BUILD:
            build = version.build
            if build is None:
                return Err(ReleasePreparationError.INVALID_VERSION_INCREMENT_SETTING)
            bumped = replace(
                version,
                build=build + 1,
                revision=zero(version.revision),
            )
    return Ok(bumped)
