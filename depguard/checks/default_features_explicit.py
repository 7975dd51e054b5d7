"""Dependencies with inline options should state ``default-features`` explicitly."""

from __future__ import annotations

from typing import List

from ..ids import (
    CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT,
    CODE_DEFAULT_FEATURES_IMPLICIT,
    FIX_ACTION_DECLARE_DEFAULT_FEATURES,
)
from ..models import DependencyTable, Finding, VersionString, WorkspaceInherited, WorkspaceModel
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed


def _has_inline_options(spec: DependencyTable) -> bool:
    if spec.optional is True:
        return True
    return any(value is not None for value in (spec.features, spec.path, spec.git))


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        for dep in manifest.dependencies:
            spec = dep.spec
            if isinstance(spec, (VersionString, WorkspaceInherited)):
                continue
            if not isinstance(spec, DependencyTable):
                raise TypeError(f"Unsupported dependency spec: {spec!r}")
            if not _has_inline_options(spec) or spec.default_features is not None:
                continue
            if is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT,
                    code=CODE_DEFAULT_FEATURES_IMPLICIT,
                    message=(
                        f"dependency '{dep.name}' has inline options but no explicit "
                        "default-features declaration"
                    ),
                    help=(
                        "Add `default-features = true` or `default-features = false` "
                        "to make the intent explicit."
                    ),
                    fix_action=FIX_ACTION_DECLARE_DEFAULT_FEATURES,
                    fix_hint="Add `default-features = true` or `default-features = false`",
                )
            )
    return findings
