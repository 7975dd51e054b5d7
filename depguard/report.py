"""JSON report envelope: build, write and read ``depguard.report.v1`` documents."""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .engine import EvaluationResult
from .ids import CHECK_TOOL_RUNTIME, CODE_RUNTIME_ERROR
from .models import SEVERITY_ERROR, VERDICT_FAIL, VERDICT_PASS, Finding, SeverityCounts, Verdict
from .policy import EffectiveConfig

SCHEMA_ID = "depguard.report.v1"
TOOL_NAME = "depguard"


class ReportError(RuntimeError):
    """Raised when a report file cannot be read or is not a depguard report."""


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def build_report(
    result: EvaluationResult, *, started_at: str, finished_at: Optional[str] = None
) -> Dict[str, Any]:
    return _envelope(
        verdict=result.verdict,
        findings=result.findings,
        data=result.data,
        started_at=started_at,
        finished_at=finished_at,
    )


def empty_report(
    config: EffectiveConfig, *, started_at: str, finished_at: Optional[str] = None
) -> Dict[str, Any]:
    """Report for a repository without a root Cargo.toml: nothing to check."""
    return _envelope(
        verdict=Verdict(status=VERDICT_PASS),
        findings=[],
        data=_summary(config.scope, config.profile, findings=0),
        started_at=started_at,
        finished_at=finished_at,
    )


def runtime_error_report(
    message: str,
    *,
    scope: str,
    profile: str,
    started_at: str,
    finished_at: Optional[str] = None,
) -> Dict[str, Any]:
    """Report describing a tool failure as a single ``tool.runtime`` finding."""
    finding = Finding(
        severity=SEVERITY_ERROR,
        check_id=CHECK_TOOL_RUNTIME,
        code=CODE_RUNTIME_ERROR,
        message=message,
        help="depguard failed before completing the check; see the message for details.",
    )
    return _envelope(
        verdict=Verdict(status=VERDICT_FAIL, counts=SeverityCounts(error=1)),
        findings=[finding],
        data=_summary(scope, profile, findings=1),
        started_at=started_at,
        finished_at=finished_at,
    )


def write_report(report: Dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
    return path


def read_report(path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ReportError(f"Report not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ReportError(f"Failed to read report {path}: {exc}") from exc
    if not isinstance(payload, dict) or payload.get("schema") != SCHEMA_ID:
        raise ReportError(f"{path} is not a {SCHEMA_ID} document")
    return payload


def report_findings(report: Dict[str, Any]) -> List[Finding]:
    """Return the report's findings in their stored order."""
    raw = report.get("findings")
    if not isinstance(raw, list):
        return []
    return [Finding.from_dict(item) for item in raw if isinstance(item, dict)]


def _envelope(
    *,
    verdict: Verdict,
    findings: List[Finding],
    data: Dict[str, Any],
    started_at: str,
    finished_at: Optional[str],
) -> Dict[str, Any]:
    return {
        "schema": SCHEMA_ID,
        "tool": {"name": TOOL_NAME, "version": __version__},
        "started_at": started_at,
        "finished_at": finished_at or utc_timestamp(),
        "verdict": verdict.to_dict(),
        "findings": [finding.to_dict() for finding in findings],
        "data": dict(data),
    }


def _summary(scope: str, profile: str, *, findings: int) -> Dict[str, Any]:
    return {
        "scope": scope,
        "profile": profile,
        "manifests_scanned": 0,
        "dependencies_scanned": 0,
        "findings_total": findings,
        "findings_emitted": findings,
    }


__all__ = [
    "ReportError",
    "SCHEMA_ID",
    "build_report",
    "empty_report",
    "read_report",
    "report_findings",
    "runtime_error_report",
    "utc_timestamp",
    "write_report",
]
