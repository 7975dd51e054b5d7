"""Flag wildcard version requirements such as ``"*"`` or ``"1.*"``."""

from __future__ import annotations

from typing import List

from ..ids import CHECK_DEPS_NO_WILDCARDS, CODE_WILDCARD_VERSION, FIX_ACTION_PIN_VERSION
from ..models import Finding, WorkspaceModel, spec_version
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        for dep in manifest.dependencies:
            version = spec_version(dep.spec)
            if version is None or "*" not in version:
                continue
            if is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_NO_WILDCARDS,
                    code=CODE_WILDCARD_VERSION,
                    message=f"dependency '{dep.name}' uses a wildcard version: {version}",
                    help="Replace wildcard versions with an explicit semver requirement.",
                    fix_action=FIX_ACTION_PIN_VERSION,
                    fix_hint="Pin to a specific semver requirement",
                )
            )
    return findings
