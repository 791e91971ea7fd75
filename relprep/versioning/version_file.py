"""Reading and writing version.json.

The file is looked up from the project directory towards the repository root;
the nearest one wins. Writing keeps keys this tool does not understand and
omits release options that are at their default, so an unchanged policy
serializes to the same bytes it was read from.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relprep.core.structured import StrDict, as_str_dict, get_int, get_str, get_table
from relprep.versioning.policy import (
    DEFAULT_BRANCH_NAME,
    DEFAULT_FIRST_UNSTABLE_TAG,
    DEFAULT_VERSION_INCREMENT,
    ReleaseOptions,
    VersioningPolicy,
)
from relprep.versioning.semver import VersionIncrement, parse_version

__all__ = [
    "SCHEMA_URL",
    "VERSION_FILE_NAME",
    "VersionConfigStore",
    "VersionFile",
    "VersionFileError",
    "find_version_file",
    "policy_from_dict",
    "policy_to_dict",
]

VERSION_FILE_NAME = "version.json"
SCHEMA_URL = (
    "https://raw.githubusercontent.com/dotnet/Nerdbank.GitVersioning/main/"
    "src/NerdBank.GitVersioning/version.schema.json"
)

_KNOWN_KEYS = {"$schema", "version", "versionHeightOffset", "release"}
_KNOWN_RELEASE_KEYS = {"branchName", "versionIncrement", "firstUnstableTag"}


class VersionFileError(Exception):
    """version.json exists but cannot be read or understood."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class VersionConfigStore(Protocol):
    """Where the release workflow reads and writes versioning policies."""

    def get_policy(self, directory: Path) -> VersioningPolicy | None: ...

    def set_policy(
        self,
        directory: Path,
        policy: VersioningPolicy,
        *,
        include_schema_property: bool = True,
    ) -> Path: ...


def find_version_file(directory: Path) -> Path | None:
    """Nearest version.json at or above ``directory``, stopping at the repo root."""
    current = directory.resolve()
    for candidate in (current, *current.parents):
        path = candidate / VERSION_FILE_NAME
        if path.is_file():
            return path
        if (candidate / ".git").exists():
            return None
    return None


def _parse_increment(raw: str, path: Path) -> VersionIncrement:
    try:
        return VersionIncrement(raw.lower())
    except ValueError:
        raise VersionFileError(path, f"invalid versionIncrement: {raw!r}") from None


def policy_from_dict(data: StrDict, path: Path) -> VersioningPolicy:
    raw_version = get_str(data, "version")
    if raw_version is None:
        raise VersionFileError(path, "missing 'version'")
    try:
        version = parse_version(raw_version)
    except ValueError as e:
        raise VersionFileError(path, str(e)) from None

    release = ReleaseOptions()
    release_table = get_table(data, "release")
    if release_table is not None:
        branch_name = release_table.get("branchName")
        increment = get_str(release_table, "versionIncrement")
        # An explicitly empty firstUnstableTag means "no tag", so no get_str here.
        first_tag = release_table.get("firstUnstableTag")
        release = ReleaseOptions(
            branch_name=branch_name if isinstance(branch_name, str) else DEFAULT_BRANCH_NAME,
            version_increment=(
                _parse_increment(increment, path) if increment else DEFAULT_VERSION_INCREMENT
            ),
            first_unstable_tag=(
                first_tag if isinstance(first_tag, str) else DEFAULT_FIRST_UNSTABLE_TAG
            ),
            extra={k: v for k, v in release_table.items() if k not in _KNOWN_RELEASE_KEYS},
        )

    extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}
    return VersioningPolicy(
        version=version,
        release=release,
        version_height_offset=get_int(data, "versionHeightOffset"),
        extra=extra,
    )


def policy_to_dict(policy: VersioningPolicy, *, include_schema_property: bool) -> StrDict:
    out: StrDict = {}
    if include_schema_property:
        out["$schema"] = SCHEMA_URL
    out["version"] = str(policy.version)
    if policy.version_height_offset is not None:
        out["versionHeightOffset"] = policy.version_height_offset

    release: StrDict = {}
    if policy.release.branch_name != DEFAULT_BRANCH_NAME:
        release["branchName"] = policy.release.branch_name
    if policy.release.version_increment is not DEFAULT_VERSION_INCREMENT:
        release["versionIncrement"] = policy.release.version_increment.value
    if policy.release.first_unstable_tag != DEFAULT_FIRST_UNSTABLE_TAG:
        release["firstUnstableTag"] = policy.release.first_unstable_tag
    release.update(policy.release.extra)
    if release:
        out["release"] = release

    out.update(policy.extra)
    return out


@dataclass(frozen=True, slots=True)
class VersionFile:
    """version.json store backed by the working tree."""

    encoding: str = "utf-8"

    def get_policy(self, directory: Path) -> VersioningPolicy | None:
        path = find_version_file(directory)
        if path is None:
            return None
        try:
            text = path.read_text(encoding=self.encoding)
        except OSError as e:
            raise VersionFileError(path, f"cannot read: {e}") from e
        try:
            obj: object = json.loads(text)
        except json.JSONDecodeError as e:
            raise VersionFileError(path, f"invalid JSON: {e}") from e
        data = as_str_dict(obj)
        if data is None:
            raise VersionFileError(path, "root must be a JSON object")
        return policy_from_dict(data, path)

    def set_policy(
        self,
        directory: Path,
        policy: VersioningPolicy,
        *,
        include_schema_property: bool = True,
    ) -> Path:
        path = find_version_file(directory) or directory.resolve() / VERSION_FILE_NAME
        data = policy_to_dict(policy, include_schema_property=include_schema_property)
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        try:
            path.write_text(text, encoding=self.encoding)
        except OSError as e:
            raise VersionFileError(path, f"cannot write: {e}") from e
        return path
