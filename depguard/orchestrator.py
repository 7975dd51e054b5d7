"""Pipeline orchestration for the ``check`` flow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import CONFIG_FILENAME, ConfigError, Overrides, load_config, resolve_config
from .engine import evaluate
from .git.diff import GitDiff, GitDiffError
from .logging import get_logger
from .models import VERDICT_FAIL
from .policy import SCOPE_DIFF, SCOPE_REPO, EffectiveConfig
from .render.markdown import render_markdown
from .repo.builder import build_workspace_model
from .repo.discover import MANIFEST_NAME
from .repo.parse import ManifestParseError
from .report import (
    build_report,
    empty_report,
    runtime_error_report,
    utc_timestamp,
    write_report,
)

EXIT_OK = 0
EXIT_TOOL_ERROR = 1
EXIT_POLICY_FAILURE = 2

DEFAULT_REPORT_OUT = Path("artifacts/depguard/report.json")
DEFAULT_MARKDOWN_OUT = Path("artifacts/depguard/comment.md")


@dataclass
class CheckOutcome:
    """Result of a ``check`` run."""

    report: Dict[str, Any]
    report_path: Path
    exit_code: int
    report_written: bool = True
    markdown_path: Optional[Path] = None
    error: Optional[str] = None


class Orchestrator:
    """Coordinates config resolution, model building, evaluation and report output."""

    def __init__(
        self,
        git_diff: GitDiff | None = None,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self.git_diff = git_diff or GitDiff()
        self._clock = clock or utc_timestamp
        self.logger = get_logger("orchestrator")

    def run_check(
        self,
        repo_root: Path,
        *,
        config_path: Path | None = None,
        overrides: Overrides | None = None,
        base: str | None = None,
        head: str | None = None,
        report_out: Path = DEFAULT_REPORT_OUT,
        write_markdown: bool = False,
        markdown_out: Path = DEFAULT_MARKDOWN_OUT,
    ) -> CheckOutcome:
        """Evaluate ``repo_root`` and write the JSON report (plus optional Markdown).

        Tool failures are captured as a ``tool.runtime`` report with exit code 1.
        """
        started_at = self._clock()
        overrides = overrides or Overrides()
        config: EffectiveConfig | None = None
        markdown_path: Path | None = None

        try:
            root = self._resolve_root(repo_root)
            config = self._load_effective_config(root, config_path, overrides)
            report = self._evaluate(root, config, base=base, head=head, started_at=started_at)
            if write_markdown:
                markdown_path = self._write_markdown(report, markdown_out)
        except (ConfigError, ManifestParseError, GitDiffError, OSError) as exc:
            self._log_exception("depguard check failed", exc)
            report = runtime_error_report(
                str(exc),
                scope=config.scope if config else (overrides.scope or SCOPE_REPO),
                profile=config.profile if config else (overrides.profile or "strict"),
                started_at=started_at,
                finished_at=self._clock(),
            )
            return self._finish(report, report_out, EXIT_TOOL_ERROR, error=str(exc))

        exit_code = EXIT_POLICY_FAILURE if report["verdict"]["status"] == VERDICT_FAIL else EXIT_OK
        return self._finish(report, report_out, exit_code, markdown_path=markdown_path)

    # ------------------------------------------------------------------
    # Internals

    @staticmethod
    def _resolve_root(repo_root: Path) -> Path:
        root = repo_root.expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Repository path not found: {repo_root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {repo_root}")
        return root

    def _load_effective_config(
        self, root: Path, config_path: Path | None, overrides: Overrides
    ) -> EffectiveConfig:
        if config_path is None:
            loaded = load_config(root / CONFIG_FILENAME)
        else:
            explicit = config_path if config_path.is_absolute() else root / config_path
            loaded = load_config(explicit, required=True)
        config = resolve_config(loaded, overrides)
        self.logger.debug(
            "Effective config: profile=%s scope=%s fail_on=%s max_findings=%d",
            config.profile,
            config.scope,
            config.fail_on,
            config.max_findings,
        )
        return config

    def _evaluate(
        self,
        root: Path,
        config: EffectiveConfig,
        *,
        base: str | None,
        head: str | None,
        started_at: str,
    ) -> Dict[str, Any]:
        if not (root / MANIFEST_NAME).is_file():
            self.logger.warning("No %s found at %s; emitting empty report", MANIFEST_NAME, root)
            return empty_report(config, started_at=started_at, finished_at=self._clock())

        changed_files = None
        if config.scope == SCOPE_DIFF:
            if not base or not head:
                raise ConfigError("diff scope requires --base and --head")
            changed = self.git_diff.changed_files(root, base, head)
            changed_files = [str(path) for path in changed]
            self.logger.debug("%d file(s) changed between %s and %s", len(changed), base, head)

        model = build_workspace_model(root, changed_files)
        result = evaluate(model, config)
        self.logger.debug(
            "Verdict %s with %d of %d finding(s) emitted",
            result.verdict.status,
            result.findings_emitted,
            result.findings_total,
        )
        return build_report(result, started_at=started_at, finished_at=self._clock())

    @staticmethod
    def _write_markdown(report: Dict[str, Any], markdown_out: Path) -> Path:
        markdown_out.parent.mkdir(parents=True, exist_ok=True)
        markdown_out.write_text(render_markdown(report), encoding="utf-8")
        return markdown_out

    def _finish(
        self,
        report: Dict[str, Any],
        report_out: Path,
        exit_code: int,
        *,
        markdown_path: Path | None = None,
        error: str | None = None,
    ) -> CheckOutcome:
        try:
            write_report(report, report_out)
        except OSError as exc:
            self._log_exception("Failed to write report", exc)
            return CheckOutcome(
                report=report,
                report_path=report_out,
                exit_code=EXIT_TOOL_ERROR,
                report_written=False,
                markdown_path=markdown_path,
                error=error or f"failed to write report {report_out}: {exc}",
            )
        return CheckOutcome(
            report=report,
            report_path=report_out,
            exit_code=exit_code,
            markdown_path=markdown_path,
            error=error,
        )

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = [
    "CheckOutcome",
    "DEFAULT_MARKDOWN_OUT",
    "DEFAULT_REPORT_OUT",
    "EXIT_OK",
    "EXIT_POLICY_FAILURE",
    "EXIT_TOOL_ERROR",
    "Orchestrator",
]
