"""Git operations used by release preparation.

Usage:
    from relprep.git import GitRepository

    with GitRepository.open(Path(".")) as repo:
        if repo is not None and not repo.is_dirty():
            print(repo.current_branch())
"""

from relprep.git.repository import (
    GitCommandFailed,
    GitError,
    GitRepository,
    Signature,
    VersionControlRepository,
)

__all__ = [
    "GitCommandFailed",
    "GitError",
    "GitRepository",
    "Signature",
    "VersionControlRepository",
]
