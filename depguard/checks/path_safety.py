"""Reject absolute dependency paths and paths that climb out of the repository."""

from __future__ import annotations

from typing import List

from ..ids import (
    CHECK_DEPS_PATH_SAFETY,
    CODE_ABSOLUTE_PATH,
    CODE_PARENT_ESCAPE,
    FIX_ACTION_REMOVE_PARENT_ESCAPE,
    FIX_ACTION_USE_REPO_RELATIVE_PATH,
)
from ..models import Finding, WorkspaceModel, spec_path
from ..paths import escapes_root, is_absolute, manifest_dir_depth
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        depth = manifest_dir_depth(str(manifest.path))
        for dep in manifest.dependencies:
            path = spec_path(dep.spec)
            if not path or is_allowed(policy, path):
                continue
            if is_absolute(path):
                findings.append(
                    dependency_finding(
                        policy,
                        manifest,
                        dep,
                        check_id=CHECK_DEPS_PATH_SAFETY,
                        code=CODE_ABSOLUTE_PATH,
                        message=f"dependency '{dep.name}' uses an absolute path: {path}",
                        help=(
                            "Use repo-relative paths. Absolute paths are not portable "
                            "and may leak host layout."
                        ),
                        fix_action=FIX_ACTION_USE_REPO_RELATIVE_PATH,
                        fix_hint="Replace with a path relative to the manifest",
                        path=path,
                    )
                )
            elif escapes_root(path, depth):
                findings.append(
                    dependency_finding(
                        policy,
                        manifest,
                        dep,
                        check_id=CHECK_DEPS_PATH_SAFETY,
                        code=CODE_PARENT_ESCAPE,
                        message=(
                            f"dependency '{dep.name}' uses a path that escapes the repo root: {path}"
                        ),
                        help="Avoid `..` segments that escape the repository root.",
                        fix_action=FIX_ACTION_REMOVE_PARENT_ESCAPE,
                        fix_hint="Vendor the crate inside the repository or depend on a published version",
                        path=path,
                    )
                )
    return findings
