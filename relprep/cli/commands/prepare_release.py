from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from relprep.core.errors import ErrorCode
from relprep.core.result import Err
from relprep.git.repository import GitCommandFailed
from relprep.output.console import RichConsole
from relprep.release.errors import exit_code_for
from relprep.release.model import OutputMode
from relprep.release.workflow import prepare_release as run_prepare_release
from relprep.versioning.semver import SemanticVersion, VersionIncrement, parse_version
from relprep.versioning.version_file import VersionFileError


def _exit(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def _parse_next_version(raw: str | None) -> SemanticVersion | None:
    if raw is None:
        return None
    try:
        version = parse_version(raw)
    except ValueError as e:
        _exit(f"invalid --next-version: {e}", code=ErrorCode.USER_ERROR)
    if version.prerelease or version.build_metadata:
        _exit(
            f"invalid --next-version '{raw}': only numeric segments are allowed",
            code=ErrorCode.USER_ERROR,
        )
    return version


def prepare_release(
    tag: str | None = typer.Option(
        None, "--tag", help="Prerelease tag for the release version (omit for stable)"
    ),
    project: Path = typer.Option(
        Path("."), "--project", "-p", help="Directory containing (or below) version.json"
    ),
    next_version: str | None = typer.Option(
        None, "--next-version", help="Version to set on the current branch (e.g. 1.4)"
    ),
    version_increment: VersionIncrement | None = typer.Option(
        None,
        "--version-increment",
        case_sensitive=False,
        help="Override release.versionIncrement (major/minor/build)",
    ),
    output_format: OutputMode = typer.Option(
        OutputMode.TEXT, "--format", "-f", case_sensitive=False, help="text or json"
    ),
) -> None:
    """Create a release branch (or advance the current one) and bump versions."""
    result = None
    try:
        result = run_prepare_release(
            project,
            release_unstable_tag=tag,
            next_version=_parse_next_version(next_version),
            version_increment=version_increment,
            output_mode=output_format,
            out=RichConsole(),
            err=RichConsole(stderr=True),
        )
    except GitCommandFailed as e:
        _exit(str(e), code=ErrorCode.GIT_ERROR)
    except VersionFileError as e:
        _exit(str(e), code=ErrorCode.IO_ERROR)

    if isinstance(result, Err):
        # The workflow already wrote the diagnostic.
        raise typer.Exit(code=int(exit_code_for(result.error)))
