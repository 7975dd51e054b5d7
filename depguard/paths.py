"""Repo-relative path handling and lexical path checks.

Everything here is a pure string algorithm. Manifests may declare paths for a
different host OS, so nothing in this module consults ``os.path`` semantics or
touches the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:[\\/]")
_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")


@dataclass(frozen=True, order=True)
class RepoPath:
    """Canonical repo-relative path with forward slashes.

    Drive letters and leading slashes are dropped, so the value never
    names an absolute location.
    """

    value: str

    @classmethod
    def new(cls, raw: str) -> "RepoPath":
        normalised = _DRIVE_LETTER.sub("", raw.replace("\\", "/"))
        while normalised.startswith(("/", "./")):
            normalised = normalised[1:] if normalised[0] == "/" else normalised[2:]
        if not normalised:
            normalised = "."
        return cls(normalised)

    @classmethod
    def from_filesystem(cls, root: Path, path: Path) -> "RepoPath":
        """Strip ``root`` from ``path``; ``path`` must live under ``root``."""
        relative = path.relative_to(root)
        return cls.new(relative.as_posix())

    def join(self, segment: str) -> "RepoPath":
        base = self.value.rstrip("/")
        if base in {"", "."}:
            return RepoPath.new(segment)
        return RepoPath.new(f"{base}/{segment}")

    def __str__(self) -> str:
        return self.value


def is_absolute(path: str) -> bool:
    """Return True for POSIX roots and Windows drive prefixes (``C:\\``, ``C:/``)."""
    if not path:
        return False
    if path.startswith("/") or path.startswith("\\\\"):
        return True
    return bool(_DRIVE_PREFIX.match(path))


def manifest_dir_depth(manifest_path: str) -> int:
    """Number of directory segments above a repo-relative manifest path."""
    parts = manifest_path.replace("\\", "/").strip("/").split("/")
    parts = parts[:-1]
    return len([part for part in parts if part and part != "."])


def escapes_root(path: str, start_depth: int = 0) -> bool:
    """Return True when folding ``..`` segments walks above the repo root.

    ``start_depth`` is the depth of the declaring manifest's directory below
    the repo root.
    """
    depth = start_depth
    for segment in re.split(r"[\\/]", path):
        if segment in {"", "."}:
            continue
        if segment == "..":
            depth -= 1
            if depth < 0:
                return True
        else:
            depth += 1
    return False


__all__ = ["RepoPath", "escapes_root", "is_absolute", "manifest_dir_depth"]
