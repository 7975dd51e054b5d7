from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterator

import pytest

from depguard.config import preset
from depguard.models import SEVERITY_ERROR
from depguard.policy import CheckPolicy, EffectiveConfig
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture(autouse=True)
def _reset_depguard_logger() -> Iterator[None]:
    """Drop handlers installed by CLI runs so later tests log through pytest."""
    yield
    logger = logging.getLogger("depguard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable Cargo workspace builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def error_policy() -> CheckPolicy:
    """An enabled, error-severity policy with no allowlist."""
    return CheckPolicy(severity=SEVERITY_ERROR)


@pytest.fixture
def only_checks() -> Callable[..., EffectiveConfig]:
    """Build a strict config that enables exactly the given check ids."""

    def _build(*check_ids: str, max_findings: int = 200, **overrides: object) -> EffectiveConfig:
        base = preset("strict")
        checks: Dict[str, CheckPolicy] = {
            check_id: CheckPolicy.disabled() for check_id in base.checks
        }
        for check_id in check_ids:
            checks[check_id] = CheckPolicy(severity=SEVERITY_ERROR)
        return EffectiveConfig(
            profile=base.profile,
            scope=str(overrides.get("scope", base.scope)),
            fail_on=str(overrides.get("fail_on", base.fail_on)),
            max_findings=max_findings,
            checks=checks,
        )

    return _build
