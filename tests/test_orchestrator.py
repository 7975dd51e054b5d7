"""Tests for depguard.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

from depguard import ids
from depguard.config import Overrides
from depguard.git.diff import GitDiff, GitDiffError, KIND_BASE_UNREACHABLE
from depguard.orchestrator import (
    EXIT_OK,
    EXIT_POLICY_FAILURE,
    EXIT_TOOL_ERROR,
    Orchestrator,
)
from depguard.paths import RepoPath

ROOT = """
[workspace]
members = ["crates/*"]

[workspace.dependencies]
serde = "1.0"
"""


class RecordingGitDiff(GitDiff):
    """Test double returning a fixed change set."""

    def __init__(self, changed: list[str] | None = None, error: Exception | None = None) -> None:
        super().__init__(runner=lambda args, cwd: "")
        self.changed = changed or []
        self.error = error
        self.calls: list[tuple[Path, str, str]] = []

    def changed_files(self, repo: Path, base: str, head: str) -> list[RepoPath]:
        self.calls.append((repo, base, head))
        if self.error is not None:
            raise self.error
        return [RepoPath.new(path) for path in self.changed]


def _orchestrator(git_diff: GitDiff | None = None) -> Orchestrator:
    return Orchestrator(git_diff=git_diff, clock=lambda: "2026-01-01T00:00:00Z")


def test_clean_workspace_passes(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "Cargo.toml": ROOT,
            "crates/a/Cargo.toml": '[package]\nname = "a"\n[dependencies]\nserde = { workspace = true }\n',
        }
    )
    out = tmp_path / "artifacts" / "report.json"
    outcome = _orchestrator().run_check(repo_builder.path(), report_out=out)

    assert outcome.exit_code == EXIT_OK
    assert outcome.report_written is True
    written = json.loads(out.read_text(encoding="utf-8"))
    assert written == outcome.report
    assert written["verdict"]["status"] == "pass"
    assert written["started_at"] == "2026-01-01T00:00:00Z"
    assert written["data"]["manifests_scanned"] == 2


def test_policy_failure_exits_two_and_writes_markdown(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "Cargo.toml": ROOT,
            "crates/a/Cargo.toml": '[package]\nname = "a"\n[dependencies]\nrand = "*"\n',
        }
    )
    markdown_out = tmp_path / "comment.md"
    outcome = _orchestrator().run_check(
        repo_builder.path(),
        report_out=tmp_path / "report.json",
        write_markdown=True,
        markdown_out=markdown_out,
    )

    assert outcome.exit_code == EXIT_POLICY_FAILURE
    assert outcome.markdown_path == markdown_out
    assert "- Verdict: **FAIL**" in markdown_out.read_text(encoding="utf-8")


def test_profile_override_downgrades_to_warn(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "Cargo.toml": ROOT,
            "crates/a/Cargo.toml": '[package]\nname = "a"\n[dependencies]\nrand = "*"\n',
        }
    )
    outcome = _orchestrator().run_check(
        repo_builder.path(),
        overrides=Overrides(profile="compat"),
        report_out=tmp_path / "report.json",
    )
    assert outcome.exit_code == EXIT_OK
    assert outcome.report["verdict"]["status"] == "warn"


def test_config_file_is_read_from_repo_root(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "Cargo.toml": '[package]\nname = "x"\n[dependencies]\nrand = "*"\n',
            "depguard.yml": "checks:\n  deps.no_wildcards:\n    allow: [rand]\n",
        }
    )
    outcome = _orchestrator().run_check(repo_builder.path(), report_out=tmp_path / "r.json")
    assert outcome.exit_code == EXIT_OK
    assert outcome.report["findings"] == []


def test_missing_root_manifest_yields_empty_report(tmp_path: Path) -> None:
    repo = tmp_path / "empty"
    repo.mkdir()
    outcome = _orchestrator().run_check(repo, report_out=tmp_path / "report.json")
    assert outcome.exit_code == EXIT_OK
    assert outcome.report["verdict"]["status"] == "pass"
    assert outcome.report["findings"] == []


def test_tool_errors_become_runtime_reports(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": "[workspace\n"})
    out = tmp_path / "report.json"
    outcome = _orchestrator().run_check(repo_builder.path(), report_out=out)

    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert outcome.report_written is True
    assert "invalid TOML" in outcome.error
    [finding] = json.loads(out.read_text(encoding="utf-8"))["findings"]
    assert finding["check_id"] == ids.CHECK_TOOL_RUNTIME
    assert finding["code"] == ids.CODE_RUNTIME_ERROR


def test_invalid_config_is_a_tool_error(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": '[package]\nname = "x"\n', "depguard.yml": "profile: 3\n"})
    outcome = _orchestrator().run_check(repo_builder.path(), report_out=tmp_path / "r.json")
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert outcome.report["findings"][0]["message"] == "`profile` must be a string"


def test_missing_explicit_config_is_a_tool_error(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": '[package]\nname = "x"\n'})
    outcome = _orchestrator().run_check(
        repo_builder.path(), config_path=Path("ci/depguard.yml"), report_out=tmp_path / "r.json"
    )
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert "Configuration file not found" in outcome.error


def test_diff_scope_filters_members(repo_builder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "Cargo.toml": ROOT,
            "crates/a/Cargo.toml": '[package]\nname = "a"\n[dependencies]\nrand = "*"\n',
            "crates/b/Cargo.toml": '[package]\nname = "b"\n[dependencies]\nlog = "*"\n',
        }
    )
    git_diff = RecordingGitDiff(changed=["crates/b/Cargo.toml"])
    outcome = _orchestrator(git_diff).run_check(
        repo_builder.path(),
        overrides=Overrides(scope="diff"),
        base="origin/main",
        head="HEAD",
        report_out=tmp_path / "report.json",
    )

    assert git_diff.calls == [(repo_builder.path().resolve(), "origin/main", "HEAD")]
    assert [f["location"]["path"] for f in outcome.report["findings"]] == ["crates/b/Cargo.toml"]
    assert outcome.report["data"]["scope"] == "diff"


def test_diff_scope_requires_revisions(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": ROOT})
    outcome = _orchestrator(RecordingGitDiff()).run_check(
        repo_builder.path(), overrides=Overrides(scope="diff"), report_out=tmp_path / "r.json"
    )
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert outcome.report["data"]["scope"] == "diff"
    assert "--base and --head" in outcome.error


def test_unreachable_base_is_a_tool_error(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": ROOT})
    git_diff = RecordingGitDiff(error=GitDiffError(KIND_BASE_UNREACHABLE, "base missing"))
    outcome = _orchestrator(git_diff).run_check(
        repo_builder.path(),
        overrides=Overrides(scope="diff"),
        base="origin/main",
        head="HEAD",
        report_out=tmp_path / "r.json",
    )
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert outcome.report["findings"][0]["message"] == "base missing"


def test_unwritable_report_path(repo_builder, tmp_path: Path) -> None:
    repo_builder.write({"Cargo.toml": '[package]\nname = "x"\n'})
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    outcome = _orchestrator().run_check(repo_builder.path(), report_out=blocker / "report.json")
    assert outcome.report_written is False
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert "failed to write report" in outcome.error


def test_missing_repo_root(tmp_path: Path) -> None:
    outcome = _orchestrator().run_check(tmp_path / "nope", report_out=tmp_path / "r.json")
    assert outcome.exit_code == EXIT_TOOL_ERROR
    assert "Repository path not found" in outcome.error
