"""Release preparation: version arithmetic, branch naming and the workflow.

- arithmetic: pure version computations
- branch_name: release branch template rendering
- workflow: orchestration over the repository and version.json
- view: text and JSON presentation
- errors: the closed set of failure kinds
"""

from __future__ import annotations

from relprep.release.errors import ReleasePreparationError, exit_code_for
from relprep.release.model import OutputMode, ReleaseBranchInfo, ReleaseInfo
from relprep.release.workflow import prepare_release

__all__ = [
    "OutputMode",
    "ReleaseBranchInfo",
    "ReleaseInfo",
    "ReleasePreparationError",
    "exit_code_for",
    "prepare_release",
]
