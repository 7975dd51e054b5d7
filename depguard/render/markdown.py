"""Markdown summary of a report, suitable for a PR comment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader

from ..models import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..report import report_findings

_TEMPLATE_NAME = "report.md.j2"
_SEVERITY_LABELS = {SEVERITY_INFO: "INFO", SEVERITY_WARNING: "WARN", SEVERITY_ERROR: "ERROR"}


def render_markdown(report: Dict[str, Any], templates_dir: Path | None = None) -> str:
    """Render ``report`` with the packaged template, or one from ``templates_dir``."""
    template = _create_env(templates_dir).get_template(_TEMPLATE_NAME)
    verdict = report.get("verdict") or {}
    data = report.get("data") or {}
    findings = report_findings(report)
    text = template.render(
        verdict=str(verdict.get("status", "")).upper(),
        emitted=data.get("findings_emitted", len(findings)),
        total=data.get("findings_total", len(findings)),
        truncated_reason=data.get("truncated_reason"),
        findings=[_finding_view(finding) for finding in findings],
    )
    return text.rstrip("\n") + "\n"


def _finding_view(finding: Finding) -> Dict[str, Any]:
    where = ""
    if finding.location is not None:
        line = f":{finding.location.line}" if finding.location.line is not None else ""
        where = f" (`{finding.location.path}`{line})"
    return {
        "severity": _SEVERITY_LABELS.get(finding.severity, finding.severity.upper()),
        "check_id": finding.check_id,
        "code": finding.code,
        "message": finding.message,
        "where": where,
        "help": finding.help,
    }


def _create_env(templates_dir: Path | None) -> Environment:
    directories: List[str] = []
    if templates_dir is not None:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = ["render_markdown"]
