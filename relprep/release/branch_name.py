"""Release branch naming."""

from __future__ import annotations

from relprep.core.result import Err, Ok, Result
from relprep.release.errors import ReleasePreparationError
from relprep.versioning.policy import VersioningPolicy
from relprep.versioning.semver import SemanticVersion

__all__ = ["VERSION_PLACEHOLDER", "is_same_branch", "resolve_release_branch_name"]

VERSION_PLACEHOLDER = "{version}"


def resolve_release_branch_name(
    policy: VersioningPolicy, version: SemanticVersion | None = None
) -> Result[str, ReleasePreparationError]:
    """Render ``release.branchName`` for ``version`` (the policy version by default).

    Only the numeric segments are substituted: ``v{version}`` with
    ``1.2-beta`` gives ``v1.2``.
    """
    template = policy.release.branch_name
    if not template or VERSION_PLACEHOLDER not in template:
        return Err(ReleasePreparationError.INVALID_BRANCH_NAME_SETTING)
    target = policy.version if version is None else version
    return Ok(template.replace(VERSION_PLACEHOLDER, target.numeric_text))


def is_same_branch(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()
