"""Release preparation workflow.

``prepare_release`` decides, from the current branch and version.json,
between two paths:

- already on the release branch: drop the prerelease tag (or set the
  requested one) and commit, without creating anything;
- anywhere else: fork the release branch, set the release version there, move
  the original branch to the next development version, and merge the release
  branch back so both histories agree.

Preconditions are checked before anything is written. Once mutation starts a
failure leaves whatever was already done in place; nothing is rolled back.
The workflow assumes nobody else touches the working tree while it runs.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from relprep.core.result import Err, Ok, Result
from relprep.git.repository import GitRepository, Signature, VersionControlRepository
from relprep.output.console import ConsoleProtocol
from relprep.release.arithmetic import (
    increment,
    is_decrement,
    set_first_prerelease,
    strip_prerelease,
    will_reset_version_height,
)
from relprep.release.branch_name import is_same_branch, resolve_release_branch_name
from relprep.release.errors import ReleasePreparationError
from relprep.release.model import OutputMode, ReleaseBranchInfo, ReleaseInfo
from relprep.release.view import (
    branch_advanced_line,
    dev_branch_line,
    release_branch_line,
    write_release_info,
)
from relprep.versioning.policy import VersioningPolicy
from relprep.versioning.semver import SemanticVersion, VersionIncrement
from relprep.versioning.version_file import VersionConfigStore, VersionFile

__all__ = [
    "RepositoryOpener",
    "get_next_dev_version",
    "prepare_release",
    "update_version",
]

RepositoryOpener = Callable[[Path], AbstractContextManager[VersionControlRepository | None]]
Clock = Callable[[], datetime]

type PrepareResult = Result[ReleaseInfo | None, ReleasePreparationError]


def _now() -> datetime:
    return datetime.now().astimezone()


def _fail(
    err: ConsoleProtocol, kind: ReleasePreparationError, message: str
) -> Err[ReleasePreparationError]:
    err.error(message)
    return Err(kind)


@dataclass(frozen=True, slots=True)
class _Session:
    project_dir: Path
    repo: VersionControlRepository
    store: VersionConfigStore
    err: ConsoleProtocol
    clock: Clock

    def signature(self) -> Result[Signature, ReleasePreparationError]:
        signature = self.repo.build_signature(self.clock())
        if signature is None:
            return _fail(
                self.err,
                ReleasePreparationError.USER_NOT_CONFIGURED,
                "Cannot create commits in this repo because git user name and email "
                "are not configured.",
            )
        return Ok(signature)


def prepare_release(
    project_dir: Path,
    *,
    release_unstable_tag: str | None = None,
    next_version: SemanticVersion | None = None,
    version_increment: VersionIncrement | None = None,
    output_mode: OutputMode = OutputMode.TEXT,
    out: ConsoleProtocol,
    err: ConsoleProtocol,
    open_repository: RepositoryOpener = GitRepository.open,
    store: VersionConfigStore | None = None,
    clock: Clock = _now,
) -> PrepareResult:
    """Prepare a release for the project in ``project_dir``.

    Args:
        project_dir: Directory whose version.json (or an ancestor's) drives the release.
        release_unstable_tag: Prerelease tag for the release version; None or
            empty releases a stable version. The leading ``-`` is optional.
        next_version: Numeric version for the development branch, replacing
            the automatic increment. Ignored on a release branch.
        version_increment: Overrides ``release.versionIncrement``. Ignored on a
            release branch.
        output_mode: Text lines as the workflow progresses, or one JSON report.
        out: Primary output channel.
        err: Channel for one-line diagnostics.
        open_repository: Opens the repository containing a directory.
        store: version.json reader/writer.
        clock: Timestamp source for commit signatures.

    Returns:
        Ok(ReleaseInfo) in JSON mode, Ok(None) in text mode, or Err with the
        failure kind.
    """
    store = VersionFile() if store is None else store

    with open_repository(project_dir) as repo:
        if repo is None:
            return _fail(
                err,
                ReleasePreparationError.NO_GIT_REPO,
                f"No git repository found above directory '{project_dir}'.",
            )
        session = _Session(project_dir=project_dir, repo=repo, store=store, err=err, clock=clock)
        return _prepare(
            session,
            release_unstable_tag=release_unstable_tag,
            next_version=next_version,
            version_increment=version_increment,
            output_mode=output_mode,
            out=out,
        )


def _prepare(
    session: _Session,
    *,
    release_unstable_tag: str | None,
    next_version: SemanticVersion | None,
    version_increment: VersionIncrement | None,
    output_mode: OutputMode,
    out: ConsoleProtocol,
) -> PrepareResult:
    repo = session.repo
    err = session.err

    if repo.is_dirty():
        return _fail(
            err,
            ReleasePreparationError.UNCOMMITTED_CHANGES,
            f"Uncommitted changes in directory '{session.project_dir}'.",
        )

    # Fail before touching any branch if commits would be impossible later.
    signature = session.signature()
    if isinstance(signature, Err):
        return signature

    original_branch = repo.current_branch()
    if repo.is_head_detached() or original_branch is None:
        return _fail(
            err,
            ReleasePreparationError.DETACHED_HEAD,
            "Detached head. Check out a branch first.",
        )

    policy = session.store.get_policy(session.project_dir)
    if policy is None:
        return _fail(
            err,
            ReleasePreparationError.NO_VERSION_FILE,
            f"Failed to load version file for directory '{session.project_dir}'.",
        )

    if release_unstable_tag:
        release_version = set_first_prerelease(policy.version, release_unstable_tag)
    else:
        release_version = strip_prerelease(policy.version)

    branch_name = resolve_release_branch_name(policy)
    if isinstance(branch_name, Err):
        return _fail(
            err,
            branch_name.error,
            f"Invalid 'branchName' setting '{policy.release.branch_name}'. "
            "Missing version placeholder '{version}'.",
        )
    release_branch = branch_name.value

    if is_same_branch(original_branch, release_branch):
        return _advance_in_place(
            session,
            policy=policy,
            release_branch=release_branch,
            release_version=release_version,
            output_mode=output_mode,
            out=out,
        )

    return _fork(
        session,
        policy=policy,
        original_branch=original_branch,
        release_branch=release_branch,
        release_version=release_version,
        next_version=next_version,
        version_increment=version_increment,
        output_mode=output_mode,
        out=out,
    )


def _advance_in_place(
    session: _Session,
    *,
    policy: VersioningPolicy,
    release_branch: str,
    release_version: SemanticVersion,
    output_mode: OutputMode,
    out: ConsoleProtocol,
) -> PrepareResult:
    info = ReleaseInfo(
        current_branch=ReleaseBranchInfo(
            name=release_branch,
            commit=session.repo.head_tip(),
            version=release_version,
        )
    )
    if output_mode is OutputMode.TEXT:
        out.print(branch_advanced_line(release_branch, policy.version, release_version))
    else:
        write_release_info(out, info)

    updated = update_version(
        session.project_dir,
        session.repo,
        session.store,
        policy.version,
        release_version,
        err=session.err,
        clock=session.clock,
    )
    if isinstance(updated, Err):
        return updated
    return Ok(None if output_mode is OutputMode.TEXT else info)


def _fork(
    session: _Session,
    *,
    policy: VersioningPolicy,
    original_branch: str,
    release_branch: str,
    release_version: SemanticVersion,
    next_version: SemanticVersion | None,
    version_increment: VersionIncrement | None,
    output_mode: OutputMode,
    out: ConsoleProtocol,
) -> PrepareResult:
    repo = session.repo
    err = session.err

    next_dev = get_next_dev_version(policy, next_version, version_increment, err=err)
    if isinstance(next_dev, Err):
        return next_dev
    next_dev_version = next_dev.value

    if repo.branch_exists(release_branch):
        return _fail(
            err,
            ReleasePreparationError.BRANCH_ALREADY_EXISTS,
            f"Cannot create branch '{release_branch}' because it already exists.",
        )

    repo.create_branch(release_branch)
    repo.checkout(release_branch)
    updated = update_version(
        session.project_dir,
        repo,
        session.store,
        policy.version,
        release_version,
        err=err,
        clock=session.clock,
    )
    if isinstance(updated, Err):
        return updated
    if output_mode is OutputMode.TEXT:
        out.print(release_branch_line(release_branch, release_version))

    repo.checkout(original_branch)
    updated = update_version(
        session.project_dir,
        repo,
        session.store,
        policy.version,
        next_dev_version,
        err=err,
        clock=session.clock,
    )
    if isinstance(updated, Err):
        return updated
    if output_mode is OutputMode.TEXT:
        out.print(dev_branch_line(original_branch, next_dev_version))

    signature = session.signature()
    if isinstance(signature, Err):
        return signature
    repo.merge(release_branch, signature.value)

    if output_mode is OutputMode.TEXT:
        return Ok(None)

    info = ReleaseInfo(
        current_branch=ReleaseBranchInfo(
            name=original_branch,
            commit=repo.head_tip(),
            version=next_dev_version,
        ),
        new_branch=ReleaseBranchInfo(
            name=release_branch,
            commit=repo.branch_tip(release_branch),
            version=release_version,
        ),
    )
    write_release_info(out, info)
    return Ok(info)


def get_next_dev_version(
    policy: VersioningPolicy,
    next_version: SemanticVersion | None,
    version_increment: VersionIncrement | None,
    *,
    err: ConsoleProtocol,
) -> Result[SemanticVersion, ReleasePreparationError]:
    """Version for the development branch once the release branch forks off.

    An explicit ``next_version`` replaces only the numeric segments of the
    current version. Otherwise the configured (or overridden) increment is
    applied. Either way the result carries ``release.firstUnstableTag``.
    """
    current = policy.version

    if next_version is not None:
        candidate = replace(
            current,
            major=next_version.major,
            minor=next_version.minor,
            build=next_version.build,
            revision=next_version.revision,
        )
    else:
        kind = (
            policy.release.version_increment if version_increment is None else version_increment
        )
        bumped = increment(current, kind)
        if isinstance(bumped, Err):
            return _fail(
                err,
                bumped.error,
                f"Cannot apply version increment '{kind}' to version '{current}' "
                "because it only has major and minor segments.",
            )
        candidate = bumped.value

    return Ok(set_first_prerelease(candidate, policy.release.first_unstable_tag))


def update_version(
    project_dir: Path,
    repo: VersionControlRepository,
    store: VersionConfigStore,
    old_version: SemanticVersion,
    new_version: SemanticVersion,
    *,
    err: ConsoleProtocol,
    clock: Clock = _now,
) -> Result[None, ReleasePreparationError]:
    """Write ``new_version`` into the checked-out branch's version.json and commit.

    Nothing is written when the branch already has ``new_version``, and no
    commit is made when rewriting the file leaves the tree unchanged.
    """
    signature = repo.build_signature(clock())
    if signature is None:
        return _fail(
            err,
            ReleasePreparationError.USER_NOT_CONFIGURED,
            "Cannot create commits in this repo because git user name and email "
            "are not configured.",
        )

    policy = store.get_policy(project_dir)
    if policy is None:
        return _fail(
            err,
            ReleasePreparationError.NO_VERSION_FILE,
            f"Failed to load version file for directory '{project_dir}'.",
        )

    if is_decrement(old_version, new_version):
        return _fail(
            err,
            ReleasePreparationError.VERSION_DECREMENT,
            f"Cannot change version from {old_version} to {new_version} "
            f"because {new_version} is older than {old_version}.",
        )

    if policy.version == new_version:
        return Ok(None)

    height_offset = policy.version_height_offset
    height_position = policy.version_height_position
    if height_position is not None and will_reset_version_height(
        policy.version, new_version, height_position
    ):
        height_offset = None

    updated = replace(policy, version=new_version, version_height_offset=height_offset)
    path = store.set_policy(project_dir, updated, include_schema_property=True)
    repo.stage(path)

    if repo.has_staged_changes():
        repo.commit(f"Set version to '{new_version}'", signature)
    return Ok(None)
