"""GitHub Actions workflow-command annotations."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import SEVERITY_ERROR, SEVERITY_WARNING
from ..report import report_findings

DEFAULT_MAX_ANNOTATIONS = 10

_LEVELS = {SEVERITY_ERROR: "error", SEVERITY_WARNING: "warning"}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def render_annotations(
    report: Dict[str, Any], max_count: int = DEFAULT_MAX_ANNOTATIONS
) -> List[str]:
    """Return one ``::level file=..,line=..::message`` line per finding, up to ``max_count``."""
    lines: List[str] = []
    for finding in report_findings(report):
        if max_count >= 0 and len(lines) >= max_count:
            break
        level = _LEVELS.get(finding.severity, "notice")
        properties: List[str] = []
        if finding.location is not None:
            properties.append(f"file={escape_property(str(finding.location.path))}")
            if finding.location.line is not None:
                properties.append(f"line={finding.location.line}")
        message = escape_data(f"[{finding.check_id}:{finding.code}] {finding.message}")
        if properties:
            lines.append(f"::{level} {','.join(properties)}::{message}")
        else:
            lines.append(f"::{level}::{message}")
    return lines


__all__ = ["DEFAULT_MAX_ANNOTATIONS", "escape_data", "escape_property", "render_annotations"]
