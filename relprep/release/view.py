"""Rendering of release preparation results.

Text mode prints one line per branch transition as it happens. JSON mode
prints a single document describing the final ``ReleaseInfo``:

    {
      "currentBranch": {"name": "main", "commit": "...", "version": "1.3-alpha"},
      "newBranch": {"name": "v1.2", "commit": "...", "version": "1.2"}
    }

``newBranch`` is ``null`` when no branch was created.
"""

from __future__ import annotations

import json

from relprep.core.structured import StrDict
from relprep.output.console import ConsoleProtocol
from relprep.release.model import ReleaseBranchInfo, ReleaseInfo
from relprep.versioning.semver import SemanticVersion


def branch_advanced_line(branch: str, old: SemanticVersion, new: SemanticVersion) -> str:
    return f"{branch} branch advanced from {old} to {new}."


def release_branch_line(branch: str, version: SemanticVersion) -> str:
    return f"{branch} branch now tracks v{version} stabilization and release."


def dev_branch_line(branch: str, version: SemanticVersion) -> str:
    return f"{branch} branch now tracks v{version} development."


def branch_info_to_dict(info: ReleaseBranchInfo) -> StrDict:
    return {"name": info.name, "commit": info.commit, "version": str(info.version)}


def release_info_to_dict(info: ReleaseInfo) -> StrDict:
    return {
        "currentBranch": branch_info_to_dict(info.current_branch),
        "newBranch": None if info.new_branch is None else branch_info_to_dict(info.new_branch),
    }


def render_json(info: ReleaseInfo) -> str:
    return json.dumps(release_info_to_dict(info), indent=2)


def write_release_info(console: ConsoleProtocol, info: ReleaseInfo) -> None:
    console.print(render_json(info))
