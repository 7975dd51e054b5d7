"""Test and benchmark crates belong in ``[dev-dependencies]``."""

from __future__ import annotations

from typing import List

from ..ids import (
    CHECK_DEPS_DEV_ONLY_IN_NORMAL,
    CODE_DEV_DEP_IN_NORMAL,
    FIX_ACTION_MOVE_TO_DEV_DEPENDENCIES,
)
from ..models import SECTION_NORMAL, Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import dependency_finding, is_allowed

DEV_ONLY_CRATES = frozenset(
    {
        "proptest",
        "quickcheck",
        "rstest",
        "test-case",
        "test-strategy",
        "mockall",
        "mockito",
        "wiremock",
        "httpmock",
        "insta",
        "expect-test",
        "criterion",
        "divan",
        "iai",
        "tempfile",
        "assert_cmd",
        "assert_fs",
        "predicates",
        "fake",
        "arbitrary",
        "cargo-llvm-cov",
    }
)


def run(model: WorkspaceModel, policy: CheckPolicy) -> List[Finding]:
    findings: List[Finding] = []
    for manifest in model.manifests:
        for dep in manifest.dependencies:
            if dep.section != SECTION_NORMAL or dep.name not in DEV_ONLY_CRATES:
                continue
            if is_allowed(policy, dep.name):
                continue
            findings.append(
                dependency_finding(
                    policy,
                    manifest,
                    dep,
                    check_id=CHECK_DEPS_DEV_ONLY_IN_NORMAL,
                    code=CODE_DEV_DEP_IN_NORMAL,
                    message=(
                        f"dependency '{dep.name}' is typically a dev-only crate "
                        "but appears in [dependencies]"
                    ),
                    help=(
                        "Move this dependency to [dev-dependencies] unless it's genuinely "
                        "needed in production code."
                    ),
                    fix_action=FIX_ACTION_MOVE_TO_DEV_DEPENDENCIES,
                    fix_hint="Move to [dev-dependencies]",
                )
            )
    return findings
