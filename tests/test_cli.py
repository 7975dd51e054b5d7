"""CLI parser and exit code tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depguard.cli import _build_parser, main


def _write(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _run(argv: list[str]) -> int:
    try:
        main(argv)
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "check"])
    assert args.verbose is True
    assert args.command == "check"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose"])
    assert args.verbose is True
    assert args.command == "check"


def test_cli_check_defaults() -> None:
    args = _build_parser().parse_args(["check"])
    assert args.mode == "standard"
    assert args.report_out == Path("artifacts/depguard/report.json")
    assert args.markdown_out == Path("artifacts/depguard/comment.md")
    assert args.write_markdown is False
    assert args.profile is None
    assert args.max_findings is None


def test_cli_rejects_unknown_profile() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["--profile", "lenient", "check"])


def test_check_exit_codes(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    _write(repo, {"Cargo.toml": '[package]\nname = "x"\n[dependencies]\nserde = "*"\n'})
    report = tmp_path / "report.json"

    assert _run(["--repo-root", str(repo), "check", "--report-out", str(report)]) == 2
    assert json.loads(report.read_text(encoding="utf-8"))["verdict"]["status"] == "fail"

    assert (
        _run(
            [
                "--repo-root",
                str(repo),
                "check",
                "--report-out",
                str(report),
                "--mode",
                "cockpit",
            ]
        )
        == 0
    )

    assert (
        _run(["--repo-root", str(repo), "--profile", "compat", "check", "--report-out", str(report)])
        == 0
    )


def test_check_tool_error_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    repo = tmp_path / "repo"
    _write(repo, {"Cargo.toml": "[workspace\n"})
    report = tmp_path / "report.json"

    assert _run(["--repo-root", str(repo), "check", "--report-out", str(report)]) == 1
    assert "depguard error:" in capsys.readouterr().err
    # Cockpit mode still succeeds because the runtime-error report was written.
    cockpit = ["--repo-root", str(repo), "check", "--report-out", str(report), "--mode", "cockpit"]
    assert _run(cockpit) == 0
    assert json.loads(report.read_text(encoding="utf-8"))["findings"][0]["code"] == "runtime_error"


def test_md_and_annotations_render_existing_report(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo = tmp_path / "repo"
    _write(repo, {"Cargo.toml": '[package]\nname = "x"\n[dependencies]\nserde = "*"\n'})
    report = tmp_path / "report.json"
    _run(["--repo-root", str(repo), "check", "--report-out", str(report)])
    capsys.readouterr()

    assert _run(["md", "--report", str(report)]) == 0
    assert capsys.readouterr().out.startswith("# Depguard report\n")

    output = tmp_path / "out" / "comment.md"
    assert _run(["md", "--report", str(report), "-o", str(output)]) == 0
    assert "- Verdict: **FAIL**" in output.read_text(encoding="utf-8")

    assert _run(["annotations", "--report", str(report), "--max", "5"]) == 0
    assert capsys.readouterr().out == (
        "::error file=Cargo.toml,line=4::[deps.no_wildcards:wildcard_version] "
        "dependency 'serde' uses a wildcard version: *\n"
    )


def test_md_with_missing_report_exits_one(tmp_path: Path) -> None:
    assert _run(["md", "--report", str(tmp_path / "missing.json")]) == 1


def test_explain(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["explain", "deps.no_wildcards"]) == 0
    assert capsys.readouterr().out.startswith("No Wildcard Versions (deps.no_wildcards)\n")

    assert _run(["explain", "parent_escape"]) == 0
    assert "Path Escapes Repository Root" in capsys.readouterr().out

    assert _run(["explain", "deps.unknown"]) == 1
    assert "Unknown check id or code" in capsys.readouterr().err
