"""Failure kinds for release preparation.

Every failure is terminal: the workflow writes one diagnostic line to the
error channel and returns ``Err(kind)``. The kind carries no payload.
"""

from __future__ import annotations

from enum import Enum

from relprep.core.errors import ErrorCode

__all__ = ["ReleasePreparationError", "exit_code_for"]


class ReleasePreparationError(Enum):
    NO_GIT_REPO = "no_git_repo"
    UNCOMMITTED_CHANGES = "uncommitted_changes"
    INVALID_BRANCH_NAME_SETTING = "invalid_branch_name_setting"
    NO_VERSION_FILE = "no_version_file"
    VERSION_DECREMENT = "version_decrement"
    BRANCH_ALREADY_EXISTS = "branch_already_exists"
    USER_NOT_CONFIGURED = "user_not_configured"
    DETACHED_HEAD = "detached_head"
    INVALID_VERSION_INCREMENT_SETTING = "invalid_version_increment_setting"

    def __str__(self) -> str:
        return self.value


def exit_code_for(kind: ReleasePreparationError) -> ErrorCode:
    match kind:
        case (
            ReleasePreparationError.NO_GIT_REPO
            | ReleasePreparationError.NO_VERSION_FILE
            | ReleasePreparationError.USER_NOT_CONFIGURED
        ):
            return ErrorCode.ENV_ERROR
        case (
            ReleasePreparationError.INVALID_BRANCH_NAME_SETTING
            | ReleasePreparationError.INVALID_VERSION_INCREMENT_SETTING
        ):
            return ErrorCode.CONFIG_ERROR
        case (
            ReleasePreparationError.UNCOMMITTED_CHANGES
            | ReleasePreparationError.DETACHED_HEAD
            | ReleasePreparationError.BRANCH_ALREADY_EXISTS
            | ReleasePreparationError.VERSION_DECREMENT
        ):
            return ErrorCode.USER_ERROR
