"""Require a version next to ``git = ...`` in publishable crates."""

from __future__ import annotations

from typing import List

from ..ids import (
    CHECK_DEPS_GIT_REQUIRES_VERSION,
    CODE_GIT_WITHOUT_VERSION,
    FIX_ACTION_ADD_VERSION_WITH_GIT,
)
from ..models import DependencyTable, Finding, VersionString, WorkspaceInherited, WorkspaceModel
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        if not policy.ignore_publish_false and not manifest.is_publishable():
            continue
        for dep in manifest.dependencies:
            spec = dep.spec
            if isinstance(spec, (VersionString, WorkspaceInherited)):
                continue
            if not isinstance(spec, DependencyTable):
                raise TypeError(f"Unsupported dependency spec: {spec!r}")
            if spec.git is None or spec.version is not None or spec.workspace_flag:
                continue
            if is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_GIT_REQUIRES_VERSION,
                    code=CODE_GIT_WITHOUT_VERSION,
                    message=(
                        f"dependency '{dep.name}' uses a git dependency without an explicit version"
                    ),
                    help=(
                        "Add an explicit version alongside `git = ...`, or use "
                        "`workspace = true` with a workspace dependency."
                    ),
                    fix_action=FIX_ACTION_ADD_VERSION_WITH_GIT,
                    fix_hint="Add version alongside the git dependency",
                    git=spec.git,
                )
            )
    return findings
