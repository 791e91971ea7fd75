"""Git repository abstraction for release preparation.

The release workflow only talks to ``VersionControlRepository``. The
production implementation, ``GitRepository``, drives the ``git`` executable
so that the user's normal configuration scopes (repository, global, system)
apply to identity lookup and merges.

Usage:
    with GitRepository.open(Path("src/project")) as repo:
        if repo is None:
            ...
        if repo.is_dirty():
            ...
        repo.create_branch("v1.2")
        repo.checkout("v1.2")

Read-only queries return plain values. Mutating operations raise
``GitCommandFailed`` when git refuses: those failures are outside the release
error taxonomy and abort the command.
"""

from __future__ import annotations

import os
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Protocol

from relprep.core.result import Err, Ok, Result
from relprep.platform.process import ProcessError
from relprep.platform.process import run as run_process

__all__ = [
    "GitCommandFailed",
    "GitError",
    "GitRepository",
    "Signature",
    "VersionControlRepository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class GitCommandFailed(Exception):
    """A mutating git command failed."""

    def __init__(self, error: GitError) -> None:
        super().__init__(f"git {error.command} failed: {error.message}")
        self.error = error


@dataclass(frozen=True, slots=True)
class Signature:
    """Author/committer identity stamped on commits."""

    name: str
    email: str
    when: datetime

    def git_date(self) -> str:
        """Date in git's internal ``<unix> <offset>`` format."""
        offset = self.when.strftime("%z") or "+0000"
        return f"{int(self.when.timestamp())} {offset}"


class VersionControlRepository(Protocol):
    """What the release workflow needs from version control."""

    def is_dirty(self) -> bool: ...

    def is_head_detached(self) -> bool: ...

    def current_branch(self) -> str | None: ...

    def head_tip(self) -> str: ...

    def branch_exists(self, name: str) -> bool: ...

    def branch_tip(self, name: str) -> str: ...

    def create_branch(self, name: str) -> None: ...

    def checkout(self, name: str) -> None: ...

    def stage(self, path: Path) -> None: ...

    def has_staged_changes(self) -> bool: ...

    def commit(self, message: str, signature: Signature) -> str: ...

    def merge(self, branch: str, signature: Signature) -> None: ...

    def build_signature(self, now: datetime) -> Signature | None: ...

    def close(self) -> None: ...


class GitRepository:
    """Repository backed by the ``git`` command line.

    Args:
        root: Working tree root, as reported by ``git rev-parse --show-toplevel``.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @classmethod
    def open(cls, path: Path) -> AbstractContextManager[GitRepository | None]:
        """Open the repository containing ``path``.

        Returns a context manager yielding the repository, or None when
        ``path`` is not inside a git working tree.
        """
        if not path.is_dir():
            return nullcontext(None)
        result = run_process(["git", "rev-parse", "--show-toplevel"], cwd=path)
        match result:
            case Err(_):
                return nullcontext(None)
            case Ok(stdout):
                return cls(Path(stdout.strip()))

    def __enter__(self) -> GitRepository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        # Nothing is held open between git invocations.
        return None

    # -- queries -------------------------------------------------------------

    def is_dirty(self) -> bool:
        """True if anything is staged, modified or untracked."""
        stdout = self._check(self._run(["status", "--porcelain"]), "status")
        return stdout.strip() != ""

    def is_head_detached(self) -> bool:
        return isinstance(self._run(["symbolic-ref", "-q", "HEAD"]), Err)

    def current_branch(self) -> str | None:
        """Current branch name, None on a detached HEAD."""
        match self._run(["symbolic-ref", "--short", "-q", "HEAD"]):
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def head_tip(self) -> str:
        return self._check(self._run(["rev-parse", "HEAD"]), "rev-parse HEAD").strip()

    def branch_exists(self, name: str) -> bool:
        result = self._run(["show-ref", "--verify", "--quiet", f"refs/heads/{name}"])
        return isinstance(result, Ok)

    def branch_tip(self, name: str) -> str:
        result = self._run(["rev-parse", "--verify", f"refs/heads/{name}"])
        return self._check(result, f"rev-parse {name}").strip()

    def has_staged_changes(self) -> bool:
        """True if the index tree differs from HEAD's tree."""
        match self._run(["diff", "--cached", "--quiet"]):
            case Ok(_):
                return False
            case Err(e) if e.returncode == 1:
                return True
            case Err(e):
                raise GitCommandFailed(self._error("diff --cached", e))

    def build_signature(self, now: datetime) -> Signature | None:
        """Identity from ``user.name``/``user.email``, None if either is unset."""
        name = self._config_value("user.name")
        email = self._config_value("user.email")
        if not name or not email:
            return None
        return Signature(name=name, email=email, when=now)

    # -- mutations -----------------------------------------------------------

    def create_branch(self, name: str) -> None:
        self._check(self._run(["branch", name]), f"branch {name}")

    def checkout(self, name: str) -> None:
        self._check(self._run(["checkout", "-q", name, "--"]), f"checkout {name}")

    def stage(self, path: Path) -> None:
        self._check(self._run(["add", "--", str(path)]), "add")

    def commit(self, message: str, signature: Signature) -> str:
        """Commit the index; returns the new tip."""
        result = self._run(["commit", "-q", "-m", message], signature=signature)
        self._check(result, "commit")
        return self.head_tip()

    def merge(self, branch: str, signature: Signature) -> None:
        """Merge ``branch`` into the current branch.

        Conflicting hunks are resolved in favor of the current branch and the
        merge is committed right away.
        """
        result = self._run(
            ["merge", "-q", "--no-edit", "-X", "ours", branch],
            signature=signature,
        )
        self._check(result, f"merge {branch}")

    # -- internals -----------------------------------------------------------

    def _config_value(self, key: str) -> str | None:
        match self._run(["config", "--get", key]):
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def _run(
        self, args: list[str], *, signature: Signature | None = None
    ) -> Result[str, ProcessError]:
        env: dict[str, str] | None = None
        if signature is not None:
            env = dict(os.environ)
            env.update(
                {
                    "GIT_AUTHOR_NAME": signature.name,
                    "GIT_AUTHOR_EMAIL": signature.email,
                    "GIT_AUTHOR_DATE": signature.git_date(),
                    "GIT_COMMITTER_NAME": signature.name,
                    "GIT_COMMITTER_EMAIL": signature.email,
                    "GIT_COMMITTER_DATE": signature.git_date(),
                    "GIT_MERGE_AUTOEDIT": "no",
                }
            )
        return run_process(["git", "-C", str(self._root), *args], cwd=self._root, env=env)

    def _error(self, command: str, e: ProcessError) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
            returncode=e.returncode,
        )

    def _check(self, result: Result[str, ProcessError], command: str) -> str:
        match result:
            case Ok(stdout):
                return stdout
            case Err(e):
                raise GitCommandFailed(self._error(command, e))
