"""Git helpers for diff-scoped checks."""

from .diff import GitDiff, GitDiffError

__all__ = ["GitDiff", "GitDiffError"]
