"""Dependency hygiene checks.

Each check is a plain function ``run(model, policy) -> list[Finding]`` with no
state of its own. :func:`get_checks` hands out a fresh ordered list per
evaluation.
"""

from __future__ import annotations

from typing import List, Tuple

from .. import ids
from . import (
    default_features_explicit,
    dev_only_in_normal,
    git_requires_version,
    no_multiple_versions,
    no_wildcards,
    optional_unused,
    path_requires_version,
    path_safety,
    workspace_inheritance,
)
from .base import CheckFn

_BUILTIN_CHECKS: Tuple[Tuple[str, CheckFn], ...] = (
    (ids.CHECK_DEPS_NO_WILDCARDS, no_wildcards.run),
    (ids.CHECK_DEPS_PATH_REQUIRES_VERSION, path_requires_version.run),
    (ids.CHECK_DEPS_PATH_SAFETY, path_safety.run),
    (ids.CHECK_DEPS_WORKSPACE_INHERITANCE, workspace_inheritance.run),
    (ids.CHECK_DEPS_GIT_REQUIRES_VERSION, git_requires_version.run),
    (ids.CHECK_DEPS_DEV_ONLY_IN_NORMAL, dev_only_in_normal.run),
    (ids.CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT, default_features_explicit.run),
    (ids.CHECK_DEPS_NO_MULTIPLE_VERSIONS, no_multiple_versions.run),
    (ids.CHECK_DEPS_OPTIONAL_UNUSED, optional_unused.run),
)


def builtin_check_ids() -> List[str]:
    return [check_id for check_id, _ in _BUILTIN_CHECKS]


def get_checks() -> List[Tuple[str, CheckFn]]:
    """Return ``(check_id, fn)`` pairs in evaluation order."""
    return list(_BUILTIN_CHECKS)


__all__ = ["CheckFn", "builtin_check_ids", "get_checks"]
