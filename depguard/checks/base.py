"""Helpers shared by check implementations."""

from __future__ import annotations

import hashlib
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, List, Optional

from ..models import (
    DependencyDeclaration,
    Finding,
    Location,
    ManifestModel,
    WorkspaceModel,
    describe_spec,
    section_table_name,
)
from ..policy import CheckPolicy

CheckFn = Callable[[WorkspaceModel, CheckPolicy], List[Finding]]


def is_allowed(policy: CheckPolicy, value: str) -> bool:
    """Return True when ``value`` matches one of the policy's allow globs."""
    return any(fnmatchcase(value, pattern) for pattern in policy.allow)


def fingerprint(*parts: Optional[str]) -> str:
    canonical = "|".join(part for part in parts if part is not None)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def dependency_data(
    manifest: ManifestModel, dep: DependencyDeclaration, **extra: Any
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "current_spec": describe_spec(dep.spec),
        "dependency": dep.name,
        "manifest": str(manifest.path),
        "section": section_table_name(dep.section),
    }
    if dep.target is not None:
        data["target"] = dep.target
    data.update(extra)
    return data


def dependency_finding(
    policy: CheckPolicy,
    manifest: ManifestModel,
    dep: DependencyDeclaration,
    *,
    check_id: str,
    code: str,
    message: str,
    help: str,
    fix_action: str,
    fix_hint: str,
    path: Optional[str] = None,
    git: Optional[str] = None,
) -> Finding:
    """Build a finding anchored at a dependency declaration.

    ``path`` or ``git`` identify the dependency source; either one is folded
    into the fingerprint so two sources for the same name stay distinct.
    """
    extra: Dict[str, Any] = {"fix_action": fix_action, "fix_hint": fix_hint}
    if path is not None:
        extra["path"] = path
    if git is not None:
        extra["git"] = git
    source = path if path is not None else git
    return Finding(
        severity=policy.severity,
        check_id=check_id,
        code=code,
        message=message,
        location=Location(path=manifest.path, line=dep.line),
        help=help,
        fingerprint=fingerprint(check_id, code, str(manifest.path), dep.name, source),
        data=dependency_data(manifest, dep, **extra),
    )


__all__ = ["CheckFn", "dependency_data", "dependency_finding", "fingerprint", "is_allowed"]
