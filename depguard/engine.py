"""Run enabled checks, then order, truncate and judge the findings."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .checks import get_checks
from .checks.base import fingerprint
from .ids import CODE_MANIFEST_PARSE_ERROR, CODE_MEMBER_GLOB_UNMATCHED, CODE_MEMBER_NOT_FOUND
from .logging import get_logger
from .models import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    VERDICT_FAIL,
    VERDICT_PASS,
    VERDICT_WARN,
    Finding,
    Location,
    ModelIssue,
    SeverityCounts,
    Verdict,
    WorkspaceModel,
)
from .policy import FAIL_ON_WARNING, EffectiveConfig

logger = get_logger("engine")

_SEVERITY_RANK = {SEVERITY_ERROR: 0, SEVERITY_WARNING: 1}
_LOWEST_RANK = 2


@dataclass
class EvaluationResult:
    """Ordered, possibly truncated findings plus the verdict computed from them."""

    findings: List[Finding]
    verdict: Verdict
    findings_total: int
    truncated_reason: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def findings_emitted(self) -> int:
        return len(self.findings)


def evaluate(model: WorkspaceModel, config: EffectiveConfig) -> EvaluationResult:
    findings: List[Finding] = [issue_finding(issue) for issue in model.issues]
    for check_id, run in get_checks():
        policy = config.check_policy(check_id)
        if policy is None:
            logger.debug("Skipping disabled check %s", check_id)
            continue
        produced = run(model, policy)
        logger.debug("%s produced %d finding(s)", check_id, len(produced))
        findings.extend(produced)

    ordered = sort_findings(findings)
    emitted, truncated_reason = truncate(ordered, config.max_findings)
    verdict = compute_verdict(emitted, config.fail_on)

    data: Dict[str, Any] = {
        "scope": config.scope,
        "profile": config.profile,
        "manifests_scanned": len(model.manifests),
        "dependencies_scanned": model.dependency_count(),
        "findings_total": len(ordered),
        "findings_emitted": len(emitted),
    }
    if truncated_reason is not None:
        data["truncated_reason"] = truncated_reason

    return EvaluationResult(
        findings=emitted,
        verdict=verdict,
        findings_total=len(ordered),
        truncated_reason=truncated_reason,
        data=data,
    )


def finding_sort_key(finding: Finding) -> Tuple[Any, ...]:
    """Severity (error first), then path and line with missing values last."""
    if finding.location is None:
        path_key: Tuple[int, str] = (1, "")
        line_key: Tuple[int, int] = (1, 0)
    else:
        path_key = (0, str(finding.location.path))
        line = finding.location.line
        line_key = (1, 0) if line is None else (0, line)
    return (
        _SEVERITY_RANK.get(finding.severity, _LOWEST_RANK),
        path_key,
        line_key,
        finding.check_id,
        finding.code,
        finding.message,
        json.dumps(finding.data, sort_keys=True, default=str),
    )


def sort_findings(findings: List[Finding]) -> List[Finding]:
    return sorted(findings, key=finding_sort_key)


def truncate(findings: List[Finding], max_findings: int) -> Tuple[List[Finding], Optional[str]]:
    """Keep the first ``max_findings`` entries; ``0`` disables truncation."""
    if max_findings <= 0 or len(findings) <= max_findings:
        return list(findings), None
    return findings[:max_findings], f"findings truncated to max_findings={max_findings}"


def compute_verdict(findings: List[Finding], fail_on: str) -> Verdict:
    counts = SeverityCounts.from_findings(findings)
    if counts.error or (fail_on == FAIL_ON_WARNING and counts.warn):
        status = VERDICT_FAIL
    elif findings:
        status = VERDICT_WARN
    else:
        status = VERDICT_PASS
    return Verdict(status=status, counts=counts)


def issue_finding(issue: ModelIssue) -> Finding:
    """Convert a model-building issue into a tool-level finding."""
    location = Location(path=issue.path) if issue.path is not None else None
    manifest = str(issue.path) if issue.path is not None else None
    return Finding(
        severity=issue.severity,
        check_id=issue.check_id,
        code=issue.code,
        message=issue.message,
        location=location,
        help=_ISSUE_HELP.get(issue.code),
        fingerprint=fingerprint(
            issue.check_id, issue.code, manifest, *(str(v) for v in issue.detail.values())
        ),
        data=dict(issue.detail),
    )


_ISSUE_HELP = {
    CODE_MANIFEST_PARSE_ERROR: "Fix the TOML syntax of this manifest; it was skipped.",
    CODE_MEMBER_NOT_FOUND: "Remove the entry from `workspace.members` or add the missing Cargo.toml.",
    CODE_MEMBER_GLOB_UNMATCHED: "Remove the glob from `workspace.members` or fix its pattern.",
}


__all__ = [
    "EvaluationResult",
    "compute_verdict",
    "evaluate",
    "finding_sort_key",
    "issue_finding",
    "sort_findings",
    "truncate",
]
