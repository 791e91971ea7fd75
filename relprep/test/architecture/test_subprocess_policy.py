from __future__ import annotations

from ._utils import iter_source_files, matches_prefix, package_root, parse_imports


def test_subprocess_is_only_imported_by_the_process_runner() -> None:
    root = package_root()
    allowlist = {"platform/process.py"}

    offenders: list[str] = []
    for file_path in iter_source_files(root):
        rel = file_path.relative_to(root)
        if rel.as_posix() in allowlist:
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "subprocess"):
                offenders.append(f"{rel}:{item.line}: direct subprocess import")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
