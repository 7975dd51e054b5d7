"""Tests for changed-file discovery through git diff."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from depguard.git.diff import (
    KIND_BASE_UNREACHABLE,
    KIND_HEAD_UNREACHABLE,
    KIND_OTHER,
    KIND_SPAWN_FAILED,
    GitDiff,
    GitDiffError,
    classify_error,
)
from depguard.paths import RepoPath


def test_changed_files_uses_two_dot_range(tmp_path: Path) -> None:
    calls: list[tuple[list[str], Path]] = []

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return "crates/a/Cargo.toml\n\ncrates\\b\\src\\lib.rs\n"

    changed = GitDiff(runner=runner).changed_files(tmp_path, "origin/main", "HEAD")

    assert changed == [RepoPath.new("crates/a/Cargo.toml"), RepoPath.new("crates/b/src/lib.rs")]
    assert calls == [(["git", "diff", "--name-only", "--relative", "origin/main..HEAD"], tmp_path)]


def test_nested_workspace_paths_are_relative_to_its_root(tmp_path: Path) -> None:
    workspace = tmp_path / "rust"
    workspace.mkdir()
    seen: list[tuple[list[str], Path]] = []

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        seen.append((list(args), Path(cwd)))
        return "Cargo.toml\ncrates/a/Cargo.toml\n"

    changed = GitDiff(runner=runner).changed_files(workspace, "main", "HEAD")

    args, cwd = seen[0]
    assert "--relative" in args
    assert cwd == workspace
    assert [str(path) for path in changed] == ["Cargo.toml", "crates/a/Cargo.toml"]


def test_missing_git_binary_is_spawn_failure(tmp_path: Path) -> None:
    def runner(args, cwd):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    with pytest.raises(GitDiffError) as excinfo:
        GitDiff(runner=runner).changed_files(tmp_path, "main", "HEAD")
    assert excinfo.value.kind == KIND_SPAWN_FAILED


def test_called_process_error_is_classified(tmp_path: Path) -> None:
    def runner(args, cwd):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(
            128, args, stderr=b"fatal: bad revision 'origin/main..HEAD'\n"
        )

    with pytest.raises(GitDiffError) as excinfo:
        GitDiff(runner=runner).changed_files(tmp_path, "origin/main", "HEAD")
    error = excinfo.value
    assert error.kind == KIND_BASE_UNREACHABLE
    assert "git fetch --deepen=100" in str(error)
    assert "git fetch --unshallow" in str(error)
    assert "git fetch origin origin/main" in str(error)
    assert "bad revision" in error.stderr


def test_classify_head_and_other_errors() -> None:
    head = classify_error("main", "feature-x", "fatal: feature-x: no such ref\n")
    assert head.kind == KIND_HEAD_UNREACHABLE

    other = classify_error("main", "HEAD", "error: something odd happened\n")
    assert other.kind == KIND_OTHER
    assert str(other) == "git diff failed: error: something odd happened"

    unknown = classify_error("v1.0", "HEAD", "fatal: ambiguous argument: unknown revision\n")
    assert unknown.kind == KIND_BASE_UNREACHABLE
