from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from relprep.versioning.semver import SemanticVersion


class OutputMode(str, Enum):
    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class ReleaseBranchInfo:
    """A branch tip after the workflow touched it."""

    name: str
    commit: str
    version: SemanticVersion

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("branch name must not be empty")
        if not self.commit.strip():
            raise ValueError("commit id must not be empty")


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    """Outcome of a release preparation.

    ``new_branch`` is None when an existing release branch was advanced in
    place and set when a new release branch was forked.
    """

    current_branch: ReleaseBranchInfo
    new_branch: ReleaseBranchInfo | None = None
