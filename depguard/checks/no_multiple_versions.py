"""Detect the same crate requested at different versions across the workspace."""

from __future__ import annotations

from typing import Dict, List, Set, Tuple

from ..ids import (
    CHECK_DEPS_NO_MULTIPLE_VERSIONS,
    CODE_DUPLICATE_DIFFERENT_VERSIONS,
    FIX_ACTION_CONSOLIDATE_VERSIONS,
)
from ..models import Finding, WorkspaceModel, is_workspace_inherited, spec_version
from ..policy import CheckPolicy
from .base import fingerprint, is_allowed


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    occurrences: Dict[str, Set[Tuple[str, str]]] = {}
    for manifest in model.manifests:
        for dep in manifest.dependencies:
            if is_workspace_inherited(dep.spec):
                continue
            version = spec_version(dep.spec)
            if version is None:
                continue
            occurrences.setdefault(dep.name, set()).add((version, str(manifest.path)))

    findings: List[Finding] = []
    for name in sorted(occurrences):
        seen = sorted(occurrences[name])
        versions = sorted({version for version, _ in seen})
        if len(versions) < 2 or is_allowed(policy, name):
            continue
        findings.append(
            Finding(
                severity=policy.severity,
                check_id=CHECK_DEPS_NO_MULTIPLE_VERSIONS,
                code=CODE_DUPLICATE_DIFFERENT_VERSIONS,
                message=(
                    f"crate '{name}' has multiple versions across workspace: {', '.join(versions)}"
                ),
                help=(
                    "Align all workspace members to use the same version via "
                    "[workspace.dependencies]."
                ),
                fingerprint=fingerprint(
                    CHECK_DEPS_NO_MULTIPLE_VERSIONS, CODE_DUPLICATE_DIFFERENT_VERSIONS, name
                ),
                data={
                    "dependency": name,
                    "versions": versions,
                    "occurrences": [
                        {"version": version, "manifest": manifest} for version, manifest in seen
                    ],
                    "fix_action": FIX_ACTION_CONSOLIDATE_VERSIONS,
                    "fix_hint": "Declare one version in [workspace.dependencies] and inherit it",
                },
            )
        )
    return findings
