"""Members should inherit dependencies declared in ``[workspace.dependencies]``."""

from __future__ import annotations

from typing import List

from ..ids import (
    CHECK_DEPS_WORKSPACE_INHERITANCE,
    CODE_MISSING_WORKSPACE_TRUE,
    FIX_ACTION_USE_WORKSPACE_INHERITANCE,
)
from ..models import Finding, WorkspaceModel, is_workspace_inherited
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    if not model.workspace_dependencies:
        return findings
    for manifest in model.manifests:
        for dep in manifest.dependencies:
            if dep.name not in model.workspace_dependencies:
                continue
            if is_workspace_inherited(dep.spec) or is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_WORKSPACE_INHERITANCE,
                    code=CODE_MISSING_WORKSPACE_TRUE,
                    message=(
                        f"dependency '{dep.name}' exists in [workspace.dependencies] "
                        "but is not declared with `workspace = true`"
                    ),
                    help=(
                        "Prefer `workspace = true` to inherit the workspace dependency "
                        "version and features."
                    ),
                    fix_action=FIX_ACTION_USE_WORKSPACE_INHERITANCE,
                    fix_hint=f"Replace with `{dep.name} = {{ workspace = true }}`",
                )
            )
    return findings
