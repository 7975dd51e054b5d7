"""Changed-file discovery through ``git diff --name-only``."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger
from ..paths import RepoPath

KIND_SPAWN_FAILED = "spawn_failed"
KIND_BASE_UNREACHABLE = "base_unreachable"
KIND_HEAD_UNREACHABLE = "head_unreachable"
KIND_OTHER = "other"

logger = get_logger("git.diff")


class GitDiffError(RuntimeError):
    """Raised when git cannot produce the changed-file list."""

    def __init__(self, kind: str, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.stderr = stderr


class GitDiff:
    """Lists files changed between two revisions.

    git runs inside ``repo`` with ``--relative``, so a workspace nested in a
    larger git checkout sees paths relative to its own root and nothing
    outside it.
    """

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def changed_files(self, repo: Path, base: str, head: str) -> List[RepoPath]:
        args = ["git", "diff", "--name-only", "--relative", f"{base}..{head}"]
        logger.debug("Running %s in %s", " ".join(args), repo)
        try:
            output = self._runner(args, cwd=repo)
        except OSError as exc:
            raise GitDiffError(KIND_SPAWN_FAILED, f"failed to run git: {exc}") from exc
        except subprocess.CalledProcessError as exc:
            stderr = _as_text(exc.stderr)
            raise classify_error(base, head, stderr) from exc
        return [RepoPath.new(line.strip()) for line in output.splitlines() if line.strip()]

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def classify_error(base: str, head: str, stderr: str) -> GitDiffError:
    """Map git's stderr to a :class:`GitDiffError` with remediation text."""
    lowered = stderr.lower()
    base_unreachable = (
        "unknown revision" in lowered
        or "bad revision" in lowered
        or "invalid revision range" in lowered
        or ("fatal:" in lowered and base.lower() in lowered)
    )
    if base_unreachable:
        return GitDiffError(
            KIND_BASE_UNREACHABLE,
            f"git base revision '{base}' is not reachable.\n\n"
            "This commonly happens in CI environments with shallow clones.\n\n"
            "Try one of:\n"
            "  1. Fetch more history: git fetch --deepen=100\n"
            "  2. Fetch the full history: git fetch --unshallow\n"
            f"  3. Fetch the specific base ref: git fetch origin {base}\n\n"
            f"git stderr: {stderr.strip()}",
            stderr=stderr,
        )
    if "fatal:" in lowered and head.lower() in lowered:
        return GitDiffError(
            KIND_HEAD_UNREACHABLE,
            f"git head revision '{head}' is not reachable.\n\n"
            "Make sure the head revision exists and has been fetched.\n\n"
            f"git stderr: {stderr.strip()}",
            stderr=stderr,
        )
    return GitDiffError(KIND_OTHER, f"git diff failed: {stderr.strip()}", stderr=stderr)


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


__all__ = [
    "GitDiff",
    "GitDiffError",
    "KIND_BASE_UNREACHABLE",
    "KIND_HEAD_UNREACHABLE",
    "KIND_OTHER",
    "KIND_SPAWN_FAILED",
    "classify_error",
]
