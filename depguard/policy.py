"""Resolved policy objects consumed by the check engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .models import SEVERITY_INFO

SCOPE_REPO = "repo"
SCOPE_DIFF = "diff"

FAIL_ON_ERROR = "error"
FAIL_ON_WARNING = "warning"


@dataclass(frozen=True)
class CheckPolicy:
    """Per-check settings after profile and override resolution."""

    enabled: bool = True
    severity: str = SEVERITY_INFO
    allow: Tuple[str, ...] = ()
    ignore_publish_false: bool = False

    @classmethod
    def disabled(cls) -> "CheckPolicy":
        return cls(enabled=False)


@dataclass(frozen=True)
class EffectiveConfig:
    """Read-only policy for one evaluation run."""

    profile: str = "strict"
    scope: str = SCOPE_REPO
    fail_on: str = FAIL_ON_ERROR
    max_findings: int = 200
    checks: Dict[str, CheckPolicy] = field(default_factory=dict, compare=False)

    def check_policy(self, check_id: str) -> Optional[CheckPolicy]:
        """Return the policy for ``check_id`` only when the check is enabled."""
        policy = self.checks.get(check_id)
        if policy is None or not policy.enabled:
            return None
        return policy
