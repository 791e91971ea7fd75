"""version.json model and storage."""

from relprep.versioning.policy import ReleaseOptions, VersioningPolicy
from relprep.versioning.semver import Position, SemanticVersion, VersionIncrement, parse_version
from relprep.versioning.version_file import VersionConfigStore, VersionFile, VersionFileError

__all__ = [
    "Position",
    "ReleaseOptions",
    "SemanticVersion",
    "VersionConfigStore",
    "VersionFile",
    "VersionFileError",
    "VersionIncrement",
    "VersioningPolicy",
    "parse_version",
]
