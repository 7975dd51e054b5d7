"""Lexical path helper tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from depguard.paths import RepoPath, escapes_root, is_absolute, manifest_dir_depth


@pytest.mark.parametrize(
    "path, expected",
    [
        ("../outside", True),
        ("./libs/nested", False),
        ("./subdir/../../..", True),
        ("", False),
        ("a/../b", False),
        ("a/../../b", True),
        ("..\\windows\\style", True),
    ],
)
def test_escapes_root_from_repo_root(path: str, expected: bool) -> None:
    assert escapes_root(path) is expected


def test_escapes_root_accounts_for_manifest_depth() -> None:
    assert escapes_root("../shared", start_depth=2) is False
    assert escapes_root("../../shared", start_depth=2) is False
    assert escapes_root("../../../shared", start_depth=2) is True


@pytest.mark.parametrize(
    "path",
    ["/opt/libs/x", "C:\\libs\\x", "D:/libs/x", "\\\\server\\share"],
)
def test_is_absolute_recognises_posix_and_windows_roots(path: str) -> None:
    assert is_absolute(path) is True


@pytest.mark.parametrize("path", ["../x", "libs/x", "", "C:relative"])
def test_is_absolute_rejects_relative_paths(path: str) -> None:
    assert is_absolute(path) is False


def test_manifest_dir_depth() -> None:
    assert manifest_dir_depth("Cargo.toml") == 0
    assert manifest_dir_depth("crates/a/Cargo.toml") == 2
    assert manifest_dir_depth("./crates\\b/Cargo.toml") == 2


def test_repo_path_normalises_separators_and_leading_dot() -> None:
    assert RepoPath.new(".\\crates\\a/Cargo.toml").value == "crates/a/Cargo.toml"
    assert RepoPath.new("./").value == "."
    assert str(RepoPath.new("crates/a").join("Cargo.toml")) == "crates/a/Cargo.toml"
    assert RepoPath.new(".").join("Cargo.toml").value == "Cargo.toml"
    assert RepoPath.new("crates/a/").join("Cargo.toml").value == "crates/a/Cargo.toml"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/abs/x", "abs/x"),
        ("//server/share/Cargo.toml", "server/share/Cargo.toml"),
        ("C:/x", "x"),
        ("c:\\crates\\a\\Cargo.toml", "crates/a/Cargo.toml"),
        ("D:relative/Cargo.toml", "relative/Cargo.toml"),
        ("/", "."),
        (".//crates/a", "crates/a"),
    ],
)
def test_repo_path_never_keeps_an_absolute_prefix(raw: str, expected: str) -> None:
    assert RepoPath.new(raw).value == expected


def test_repo_path_from_filesystem(tmp_path: Path) -> None:
    nested = tmp_path / "crates" / "a" / "Cargo.toml"
    assert RepoPath.from_filesystem(tmp_path, nested) == RepoPath.new("crates/a/Cargo.toml")
