"""Non-raising entry points for fuzz harnesses.

Each function accepts arbitrary input and returns ``None`` instead of raising
when the input cannot be handled. None of them touch the filesystem.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..models import DependencySpec, ManifestModel
from ..paths import RepoPath
from .discover import MANIFEST_NAME, ROOT_MANIFEST, expand_patterns, is_excluded
from .parse import ManifestParseError, load_document, parse_member_manifest as _parse_member
from .parse import parse_root_manifest as _parse_root

_FUZZ_MEMBER = RepoPath.new("crates/fuzz/Cargo.toml")

Data = Union[str, bytes]


def parse_root_manifest(
    data: Data,
) -> Optional[Tuple[Dict[str, DependencySpec], ManifestModel]]:
    text = _decode(data)
    if text is None:
        return None
    try:
        return _parse_root(ROOT_MANIFEST, text)
    except (ManifestParseError, RecursionError):
        return None


def parse_member_manifest(data: Data) -> Optional[ManifestModel]:
    text = _decode(data)
    if text is None:
        return None
    try:
        return _parse_member(_FUZZ_MEMBER, text)
    except (ManifestParseError, RecursionError):
        return None


def expand_globs(patterns: Sequence[str], candidates: Sequence[str]) -> Optional[List[str]]:
    """Match member globs against candidate directories."""
    try:
        return expand_patterns(list(patterns), list(candidates))
    except (ValueError, TypeError, RecursionError):
        return None


def discover_members(root_text: Data, candidates: Sequence[str]) -> Optional[List[str]]:
    """Resolve member manifests from root text against candidate member directories."""
    text = _decode(root_text)
    if text is None:
        return None
    try:
        document = load_document(str(ROOT_MANIFEST), text)
        workspace = document.get("workspace")
        found = {str(ROOT_MANIFEST)}
        if isinstance(workspace, dict):
            members = _strings(workspace.get("members"))
            excludes = _strings(workspace.get("exclude"))
            for directory in expand_patterns(members, list(candidates)):
                if not is_excluded(directory, excludes):
                    found.add(str(RepoPath.new(directory).join(MANIFEST_NAME)))
        return sorted(found)
    except (ManifestParseError, ValueError, TypeError, RecursionError):
        return None


def _strings(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _decode(data: Data) -> Optional[str]:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


__all__ = ["discover_members", "expand_globs", "parse_member_manifest", "parse_root_manifest"]
