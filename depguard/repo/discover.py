"""Resolve the member manifests of a Cargo workspace."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..ids import (
    CHECK_TOOL_DISCOVERY,
    CODE_MEMBER_GLOB_UNMATCHED,
    CODE_MEMBER_NOT_FOUND,
)
from ..logging import get_logger
from ..models import SEVERITY_WARNING, ModelIssue
from ..paths import RepoPath, escapes_root, is_absolute
from .parse import load_document, read_manifest_text

MANIFEST_NAME = "Cargo.toml"
ROOT_MANIFEST = RepoPath.new(MANIFEST_NAME)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "target",
    "node_modules",
    "__pycache__",
    ".venv",
    ".idea",
}

_GLOB_CHARS = set("*?[")
_NESTED_WORKSPACE = re.compile(r"^\s*\[\s*workspace\s*[.\]]", re.MULTILINE)

logger = get_logger("discover")


@dataclass
class DiscoveryResult:
    """Sorted, deduplicated manifest paths plus any non-fatal problems."""

    manifests: List[RepoPath] = field(default_factory=list)
    issues: List[ModelIssue] = field(default_factory=list)
    nested_workspaces: List[RepoPath] = field(default_factory=list)


def discover_manifests(repo_root: Path) -> DiscoveryResult:
    """Read the root manifest under ``repo_root`` and resolve its members."""
    text = read_manifest_text(repo_root / MANIFEST_NAME, str(ROOT_MANIFEST))
    document = load_document(str(ROOT_MANIFEST), text)
    return discover_from_document(repo_root, document)


def discover_from_document(repo_root: Path, document: Dict[str, Any]) -> DiscoveryResult:
    workspace = document.get("workspace")
    if not isinstance(workspace, dict):
        logger.debug("No [workspace] table; scanning the root manifest only")
        return DiscoveryResult(manifests=[ROOT_MANIFEST])

    members = _string_list(workspace.get("members"))
    excludes = _string_list(workspace.get("exclude"))
    result = DiscoveryResult()
    found: Set[RepoPath] = {ROOT_MANIFEST}
    candidates: Optional[List[str]] = None

    for pattern in members:
        normalised = _normalise_pattern(pattern)
        if normalised is None:
            # "." names the root package, which is always included.
            continue
        if is_absolute(pattern) or escapes_root(pattern):
            result.issues.append(
                _issue(
                    CODE_MEMBER_NOT_FOUND,
                    f"workspace member `{pattern}` points outside the repository",
                    pattern,
                )
            )
            continue

        if not _has_glob(normalised):
            if (repo_root / normalised / MANIFEST_NAME).is_file():
                if not is_excluded(normalised, excludes):
                    found.add(RepoPath.new(normalised).join(MANIFEST_NAME))
            else:
                result.issues.append(
                    _issue(
                        CODE_MEMBER_NOT_FOUND,
                        f"workspace member `{pattern}` has no {MANIFEST_NAME}",
                        pattern,
                    )
                )
            continue

        if candidates is None:
            candidates = list(_candidate_dirs(repo_root))
        matched = expand_patterns([normalised], candidates)
        if not matched:
            result.issues.append(
                _issue(
                    CODE_MEMBER_GLOB_UNMATCHED,
                    f"workspace member glob `{pattern}` matched no {MANIFEST_NAME}",
                    pattern,
                )
            )
            continue
        for directory in matched:
            if is_excluded(directory, excludes):
                logger.debug("Excluding workspace member %s", directory)
                continue
            found.add(RepoPath.new(directory).join(MANIFEST_NAME))

    result.manifests = sorted(found)
    result.nested_workspaces = [
        path
        for path in result.manifests
        if path != ROOT_MANIFEST and _declares_workspace(repo_root, path)
    ]
    for path in result.nested_workspaces:
        logger.debug("Member %s declares its own [workspace]; not expanding it", path)
    logger.debug("Discovered %d manifest(s)", len(result.manifests))
    return result


def expand_patterns(patterns: Sequence[str], candidates: Iterable[str]) -> List[str]:
    """Return the candidates matched by any pattern, preserving candidate order."""
    compiled = [_split(pattern) for pattern in patterns]
    matched: List[str] = []
    for candidate in candidates:
        parts = _split(candidate)
        if any(_match_parts(pattern, parts) for pattern in compiled):
            matched.append(candidate)
    return matched


def glob_matches(pattern: str, path: str) -> bool:
    """Segment-aware glob match: ``*`` stays within one segment, ``**`` spans many."""
    return _match_parts(_split(pattern), _split(path))


def is_excluded(directory: str, excludes: Sequence[str]) -> bool:
    """``exclude`` entries match the directory itself or any of its ancestors."""
    parts = _split(directory)
    for pattern in excludes:
        compiled = _split(pattern)
        if not compiled:
            continue
        for end in range(1, len(parts) + 1):
            if _match_parts(compiled, parts[:end]):
                return True
    return False


def _match_parts(pattern: Tuple[str, ...], parts: Tuple[str, ...]) -> bool:
    # Positions in ``parts`` reachable after consuming each pattern segment.
    positions = {0}
    for segment in pattern:
        if not positions:
            return False
        if segment == "**":
            start = min(positions)
            positions = set(range(start, len(parts) + 1))
            continue
        positions = {
            index + 1
            for index in positions
            if index < len(parts) and fnmatchcase(parts[index], segment)
        }
    return len(parts) in positions


def _split(value: str) -> Tuple[str, ...]:
    return tuple(
        part for part in value.replace("\\", "/").split("/") if part not in {"", "."}
    )


def _normalise_pattern(pattern: str) -> Optional[str]:
    parts = _split(pattern)
    if not parts:
        return None
    return "/".join(parts)


def _has_glob(pattern: str) -> bool:
    return any(char in _GLOB_CHARS for char in pattern)


def _candidate_dirs(repo_root: Path) -> Iterable[str]:
    """Yield repo-relative directories (excluding the root) that contain a manifest."""
    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current = Path(dirpath)
        if current == repo_root:
            continue
        if MANIFEST_NAME in filenames:
            yield current.relative_to(repo_root).as_posix()


def _declares_workspace(repo_root: Path, manifest: RepoPath) -> bool:
    try:
        text = (repo_root / str(manifest)).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return bool(_NESTED_WORKSPACE.search(text))


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _issue(code: str, message: str, pattern: str) -> ModelIssue:
    logger.warning(message)
    return ModelIssue(
        check_id=CHECK_TOOL_DISCOVERY,
        code=code,
        severity=SEVERITY_WARNING,
        message=message,
        path=ROOT_MANIFEST,
        detail={"member": pattern},
    )


__all__ = [
    "DiscoveryResult",
    "MANIFEST_NAME",
    "ROOT_MANIFEST",
    "discover_from_document",
    "discover_manifests",
    "expand_patterns",
    "glob_matches",
    "is_excluded",
]
