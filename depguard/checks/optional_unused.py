"""Optional dependencies must be enabled by at least one feature."""

from __future__ import annotations

from typing import Dict, List, Set

from ..ids import (
    CHECK_DEPS_OPTIONAL_UNUSED,
    CODE_OPTIONAL_NOT_IN_FEATURES,
    FIX_ACTION_REFERENCE_IN_FEATURE,
)
from ..models import Finding, WorkspaceModel, spec_is_optional
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def referenced_dependencies(features: Dict[str, List[str]]) -> Set[str]:
    """Names enabled by ``dep:name``, ``name/feat``, ``name?/feat`` or bare ``name``."""
    names: Set[str] = set()
    for values in features.values():
        for value in values:
            if value.startswith("dep:"):
                names.add(value[4:])
            elif "/" in value:
                names.add(value.split("/", 1)[0].rstrip("?"))
            else:
                names.add(value)
    return names


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        referenced = referenced_dependencies(manifest.features)
        for dep in manifest.dependencies:
            if not spec_is_optional(dep.spec) or dep.name in referenced:
                continue
            if is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_OPTIONAL_UNUSED,
                    code=CODE_OPTIONAL_NOT_IN_FEATURES,
                    message=f"optional dependency '{dep.name}' is not referenced in any feature",
                    help="Add a feature that enables this dependency, or remove `optional = true`.",
                    fix_action=FIX_ACTION_REFERENCE_IN_FEATURE,
                    fix_hint=f'Add `"dep:{dep.name}"` to a feature in [features]',
                )
            )
    return findings
