"""Error codes for CLI exit status.

Release preparation failures are mapped onto these codes by
``relprep.release.errors.exit_code_for`` so shell scripts can tell an
operator mistake from a broken environment or a bad policy file.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for failed CLI commands.

    These values are used as process exit codes and should remain stable:
    - 1: User error (dirty tree, wrong branch state, version would go backwards)
    - 2: Environment error (no repository, no version file, no git identity)
    - 3: Config error (invalid settings in version.json)
    - 4: Git error (a git command failed unexpectedly)
    - 5: I/O error (version file unreadable or malformed)
    """

    USER_ERROR = 1
    ENV_ERROR = 2
    CONFIG_ERROR = 3
    GIT_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")
