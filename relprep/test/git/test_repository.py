"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from relprep.git.repository import GitCommandFailed, GitRepository, Signature


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


def git_args(mock_run: MagicMock, call: int = -1) -> list[str]:
    """Arguments after ``git -C <root>`` for one recorded call."""
    cmd = mock_run.call_args_list[call].args[0]
    assert cmd[:2] == ["git", "-C"]
    return cmd[3:]


SIGNATURE = Signature(
    name="Release Bot",
    email="bot@example.com",
    when=datetime(2026, 10, 17, 12, 0, tzinfo=timezone(timedelta(hours=2))),
)


class TestSignature:
    def test_git_date(self) -> None:
        assert SIGNATURE.git_date() == "1792231200 +0200"

    def test_naive_datetime_is_local(self) -> None:
        when = datetime(2026, 10, 17, 12, 0)
        signature = Signature(name="a", email="b", when=when)
        assert signature.git_date().startswith(f"{int(when.timestamp())} ")


class TestOpen:
    def test_missing_directory(self, tmp_path: Path) -> None:
        with GitRepository.open(tmp_path / "nope") as repo:
            assert repo is None

    @patch("subprocess.run")
    def test_not_a_repository(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: not a git repository"
        )
        with GitRepository.open(tmp_path) as repo:
            assert repo is None

    @patch("subprocess.run")
    def test_resolves_toplevel(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=f"{tmp_path}\n")
        with GitRepository.open(tmp_path / ".") as repo:
            assert repo is not None
            repo.head_tip()

        assert mock_run.call_args.args[0][:3] == ["git", "-C", str(tmp_path)]


class TestQueries:
    @patch("subprocess.run")
    def test_is_dirty(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)

        mock_run.return_value = make_completed_process(stdout="?? new.txt\n")
        assert repo.is_dirty() is True
        assert git_args(mock_run) == ["status", "--porcelain"]

        mock_run.return_value = make_completed_process(stdout="")
        assert repo.is_dirty() is False

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)

        mock_run.return_value = make_completed_process(stdout="main\n")
        assert repo.current_branch() == "main"
        assert repo.is_head_detached() is False

        mock_run.return_value = make_completed_process(returncode=1)
        assert repo.current_branch() is None
        assert repo.is_head_detached() is True

    @patch("subprocess.run")
    def test_branch_exists(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)

        mock_run.return_value = make_completed_process()
        assert repo.branch_exists("v1.2") is True
        assert git_args(mock_run) == ["show-ref", "--verify", "--quiet", "refs/heads/v1.2"]

        mock_run.return_value = make_completed_process(returncode=1)
        assert repo.branch_exists("v1.2") is False

    @patch("subprocess.run")
    def test_tips(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.return_value = make_completed_process(stdout="abc123\n")

        assert repo.head_tip() == "abc123"
        assert repo.branch_tip("v1.2") == "abc123"
        assert git_args(mock_run) == ["rev-parse", "--verify", "refs/heads/v1.2"]

    @patch("subprocess.run")
    def test_has_staged_changes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)

        mock_run.return_value = make_completed_process(returncode=1)
        assert repo.has_staged_changes() is True

        mock_run.return_value = make_completed_process()
        assert repo.has_staged_changes() is False

        mock_run.return_value = make_completed_process(returncode=128, stderr="bad")
        with pytest.raises(GitCommandFailed):
            repo.has_staged_changes()

    @patch("subprocess.run")
    def test_build_signature(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        now = datetime(2026, 10, 17, tzinfo=timezone.utc)
        mock_run.side_effect = [
            make_completed_process(stdout="Release Bot\n"),
            make_completed_process(stdout="bot@example.com\n"),
        ]

        signature = repo.build_signature(now)

        assert signature == Signature(name="Release Bot", email="bot@example.com", when=now)

    @patch("subprocess.run")
    def test_build_signature_missing_email(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.side_effect = [
            make_completed_process(stdout="Release Bot\n"),
            make_completed_process(returncode=1),
        ]

        assert repo.build_signature(datetime.now(timezone.utc)) is None


class TestMutations:
    @patch("subprocess.run")
    def test_checkout_failure_raises(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.return_value = make_completed_process(
            returncode=1, stderr="error: pathspec 'v9' did not match\n"
        )

        with pytest.raises(GitCommandFailed) as excinfo:
            repo.checkout("v9")

        assert excinfo.value.error.command == "checkout v9"
        assert excinfo.value.error.message == "error: pathspec 'v9' did not match"

    @patch("subprocess.run")
    def test_commit_uses_signature(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.side_effect = [
            make_completed_process(),
            make_completed_process(stdout="def456\n"),
        ]

        tip = repo.commit("Set version to '1.3-alpha'", SIGNATURE)

        assert tip == "def456"
        assert git_args(mock_run, 0) == ["commit", "-q", "-m", "Set version to '1.3-alpha'"]
        env = mock_run.call_args_list[0].kwargs["env"]
        assert env["GIT_AUTHOR_NAME"] == "Release Bot"
        assert env["GIT_COMMITTER_EMAIL"] == "bot@example.com"
        assert env["GIT_COMMITTER_DATE"] == "1792231200 +0200"

    @patch("subprocess.run")
    def test_merge_favors_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.return_value = make_completed_process()

        repo.merge("v1.2", SIGNATURE)

        assert git_args(mock_run) == ["merge", "-q", "--no-edit", "-X", "ours", "v1.2"]
        assert mock_run.call_args.kwargs["env"]["GIT_MERGE_AUTOEDIT"] == "no"

    @patch("subprocess.run")
    def test_queries_use_inherited_env(self, mock_run: MagicMock, tmp_path: Path) -> None:
        repo = GitRepository(tmp_path)
        mock_run.return_value = make_completed_process()

        repo.create_branch("v1.2")

        assert git_args(mock_run) == ["branch", "v1.2"]
        assert mock_run.call_args.kwargs["env"] is None
