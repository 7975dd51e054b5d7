"""CLI entrypoints for depguard commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import PROFILES, Overrides
from .explain import format_explanation, lookup_explanation
from .logging import configure_logging
from .orchestrator import (
    DEFAULT_MARKDOWN_OUT,
    DEFAULT_REPORT_OUT,
    EXIT_OK,
    EXIT_TOOL_ERROR,
    Orchestrator,
)
from .policy import FAIL_ON_ERROR, FAIL_ON_WARNING, SCOPE_DIFF, SCOPE_REPO
from .render.annotations import DEFAULT_MAX_ANNOTATIONS, render_annotations
from .render.markdown import render_markdown
from .report import ReportError, read_report

MODE_STANDARD = "standard"
MODE_COCKPIT = "cockpit"


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_report_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--report",
        type=Path,
        default=DEFAULT_REPORT_OUT,
        help="Path to the JSON report file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depguard",
        description="Check Cargo workspace manifests for dependency hygiene problems.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--repo-root",
        type=Path,
        default=Path("."),
        help="Path to the repository root (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file, relative to the repo root (defaults to depguard.yml).",
    )
    parser.add_argument("--profile", choices=PROFILES, help="Policy preset to start from.")
    parser.add_argument(
        "--scope",
        choices=(SCOPE_REPO, SCOPE_DIFF),
        help="Check every manifest (repo) or only manifests changed between --base and --head.",
    )
    parser.add_argument(
        "--max-findings",
        type=int,
        default=None,
        help="Maximum number of findings to emit (0 for unlimited).",
    )
    parser.add_argument(
        "--fail-on",
        choices=(FAIL_ON_ERROR, FAIL_ON_WARNING),
        help="Lowest severity that fails the run.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Evaluate policy and write the JSON report.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument("--base", help="Base revision for diff scope (e.g. origin/main).")
    check_parser.add_argument("--head", help="Head revision for diff scope (e.g. HEAD).")
    check_parser.add_argument(
        "--report-out",
        type=Path,
        default=DEFAULT_REPORT_OUT,
        help="Where to write the JSON report.",
    )
    check_parser.add_argument(
        "--write-markdown",
        action="store_true",
        help="Also write a Markdown summary.",
    )
    check_parser.add_argument(
        "--markdown-out",
        type=Path,
        default=DEFAULT_MARKDOWN_OUT,
        help="Where to write the Markdown summary (with --write-markdown).",
    )
    check_parser.add_argument(
        "--mode",
        choices=(MODE_STANDARD, MODE_COCKPIT),
        default=MODE_STANDARD,
        help="standard exits 2 on policy failure; cockpit exits 0 once a report is written.",
    )

    md_parser = subparsers.add_parser(
        "md",
        help="Render Markdown from an existing JSON report.",
    )
    _add_verbose_option(md_parser, suppress_default=True)
    _add_report_option(md_parser)
    md_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the Markdown here instead of stdout.",
    )

    annotations_parser = subparsers.add_parser(
        "annotations",
        help="Render GitHub Actions annotations from an existing JSON report.",
    )
    _add_verbose_option(annotations_parser, suppress_default=True)
    _add_report_option(annotations_parser)
    annotations_parser.add_argument(
        "--max",
        type=int,
        default=DEFAULT_MAX_ANNOTATIONS,
        help="Maximum number of annotations to emit.",
    )

    explain_parser = subparsers.add_parser(
        "explain",
        help="Explain a check id or finding code.",
    )
    _add_verbose_option(explain_parser, suppress_default=True)
    explain_parser.add_argument(
        "identifier",
        help='A check id (e.g. "deps.no_wildcards") or code (e.g. "wildcard_version").',
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for depguard commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "check":
        _run_check(parser, args)
    elif args.command == "md":
        report = _load_report(parser, args.report)
        markdown = render_markdown(report)
        if args.output is None:
            sys.stdout.write(markdown)
        else:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(markdown, encoding="utf-8")
    elif args.command == "annotations":
        report = _load_report(parser, args.report)
        for line in render_annotations(report, max_count=args.max):
            print(line)
    elif args.command == "explain":
        explanation = lookup_explanation(args.identifier)
        if explanation is None:
            parser.exit(
                1,
                f"Unknown check id or code: {args.identifier}\n"
                "Run `depguard explain` with a value such as deps.no_wildcards.\n",
            )
        print(format_explanation(args.identifier, explanation), end="")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_check(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    overrides = Overrides(
        profile=args.profile,
        scope=args.scope,
        max_findings=args.max_findings,
        fail_on=args.fail_on,
    )
    outcome = Orchestrator().run_check(
        args.repo_root,
        config_path=args.config,
        overrides=overrides,
        base=args.base,
        head=args.head,
        report_out=args.report_out,
        write_markdown=bool(args.write_markdown),
        markdown_out=args.markdown_out,
    )

    if outcome.error is not None:
        print(f"depguard error: {outcome.error}", file=sys.stderr)
    if outcome.report_written:
        verdict = outcome.report["verdict"]
        data = outcome.report["data"]
        print(
            f"depguard: {verdict['status']} "
            f"({data['findings_emitted']} of {data['findings_total']} finding(s)); "
            f"report written to {outcome.report_path}"
        )

    exit_code = outcome.exit_code
    if args.mode == MODE_COCKPIT and outcome.report_written:
        exit_code = EXIT_OK
    if exit_code != EXIT_OK:
        parser.exit(exit_code)


def _load_report(parser: argparse.ArgumentParser, path: Path) -> dict:
    try:
        return read_report(path)
    except ReportError as exc:
        parser.exit(EXIT_TOOL_ERROR, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
