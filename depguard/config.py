"""Configuration loading for depguard (depguard.yml) and profile resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .checks import builtin_check_ids
from .ids import (
    CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT,
    CHECK_DEPS_DEV_ONLY_IN_NORMAL,
    CHECK_DEPS_GIT_REQUIRES_VERSION,
    CHECK_DEPS_NO_MULTIPLE_VERSIONS,
    CHECK_DEPS_NO_WILDCARDS,
    CHECK_DEPS_OPTIONAL_UNUSED,
    CHECK_DEPS_PATH_REQUIRES_VERSION,
    CHECK_DEPS_PATH_SAFETY,
    CHECK_DEPS_WORKSPACE_INHERITANCE,
)
from .logging import get_logger
from .models import SEVERITIES, SEVERITY_ERROR, SEVERITY_WARNING
from .policy import (
    FAIL_ON_ERROR,
    FAIL_ON_WARNING,
    SCOPE_DIFF,
    SCOPE_REPO,
    CheckPolicy,
    EffectiveConfig,
)

CONFIG_FILENAME = "depguard.yml"

PROFILE_STRICT = "strict"
PROFILE_WARN = "warn"
PROFILE_COMPAT = "compat"
PROFILES = (PROFILE_STRICT, PROFILE_WARN, PROFILE_COMPAT)

DEFAULT_MAX_FINDINGS = 200

CORE_CHECKS = (
    CHECK_DEPS_NO_WILDCARDS,
    CHECK_DEPS_PATH_REQUIRES_VERSION,
    CHECK_DEPS_PATH_SAFETY,
    CHECK_DEPS_WORKSPACE_INHERITANCE,
    CHECK_DEPS_GIT_REQUIRES_VERSION,
)
HYGIENE_CHECKS = (
    CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT,
    CHECK_DEPS_NO_MULTIPLE_VERSIONS,
    CHECK_DEPS_OPTIONAL_UNUSED,
    CHECK_DEPS_DEV_ONLY_IN_NORMAL,
)

_SEVERITY_ALIASES = {"warn": SEVERITY_WARNING}
_FAIL_ON_VALUES = (FAIL_ON_ERROR, FAIL_ON_WARNING)

logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class CheckConfig:
    """Per-check overrides from depguard.yml."""

    enabled: Optional[bool] = None
    severity: Optional[str] = None
    allow: List[str] = field(default_factory=list)
    ignore_publish_false: Optional[bool] = None


@dataclass
class DepguardConfig:
    """Represents the settings defined in depguard.yml, before profile resolution."""

    path: Optional[Path] = None
    profile: Optional[str] = None
    scope: Optional[str] = None
    fail_on: Optional[str] = None
    max_findings: Optional[int] = None
    checks: Dict[str, CheckConfig] = field(default_factory=dict)


@dataclass
class Overrides:
    """Command-line values that take precedence over the file."""

    profile: Optional[str] = None
    scope: Optional[str] = None
    max_findings: Optional[int] = None
    fail_on: Optional[str] = None


def load_config(config_path: Path, *, required: bool = False) -> DepguardConfig:
    """Load configuration from a file or from ``depguard.yml`` inside a directory."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return DepguardConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    checks: Dict[str, CheckConfig] = {}
    raw_checks = data.get("checks")
    if raw_checks is not None and not isinstance(raw_checks, dict):
        raise ConfigError("`checks` must be a mapping of check id to settings")
    for check_id, raw in (raw_checks or {}).items():
        checks[str(check_id)] = _parse_check(str(check_id), raw)

    return DepguardConfig(
        path=config_file,
        profile=_as_str(data.get("profile"), "profile"),
        scope=_as_str(data.get("scope"), "scope"),
        fail_on=_as_str(data.get("fail_on"), "fail_on"),
        max_findings=_as_count(data.get("max_findings"), "max_findings"),
        checks=checks,
    )


def preset(profile: str) -> EffectiveConfig:
    """Return the built-in policy for ``profile``."""
    if profile == PROFILE_STRICT:
        core, hygiene, fail_on = SEVERITY_ERROR, SEVERITY_WARNING, FAIL_ON_ERROR
    elif profile == PROFILE_WARN:
        core, hygiene, fail_on = SEVERITY_WARNING, SEVERITY_WARNING, FAIL_ON_WARNING
    elif profile == PROFILE_COMPAT:
        core, hygiene, fail_on = SEVERITY_WARNING, None, FAIL_ON_ERROR
    else:
        raise ConfigError(f"Unknown profile: {profile} (expected {'|'.join(PROFILES)})")

    checks: Dict[str, CheckPolicy] = {}
    for check_id in CORE_CHECKS:
        checks[check_id] = CheckPolicy(severity=core)
    for check_id in HYGIENE_CHECKS:
        checks[check_id] = (
            CheckPolicy(severity=hygiene) if hygiene is not None else CheckPolicy.disabled()
        )
    return EffectiveConfig(
        profile=profile,
        scope=SCOPE_REPO,
        fail_on=fail_on,
        max_findings=DEFAULT_MAX_FINDINGS,
        checks=checks,
    )


def resolve_config(
    config: DepguardConfig, overrides: Optional[Overrides] = None
) -> EffectiveConfig:
    """Merge preset, file settings and command-line overrides into one policy."""
    overrides = overrides or Overrides()
    profile = overrides.profile or config.profile or PROFILE_STRICT
    base = preset(profile)

    scope = overrides.scope or config.scope or base.scope
    if scope not in (SCOPE_REPO, SCOPE_DIFF):
        raise ConfigError(f"Unknown scope: {scope} (expected 'repo' or 'diff')")

    fail_on_raw = overrides.fail_on or config.fail_on
    fail_on = _parse_fail_on(fail_on_raw) if fail_on_raw else base.fail_on

    max_findings = base.max_findings
    if overrides.max_findings is not None:
        max_findings = overrides.max_findings
    elif config.max_findings is not None:
        max_findings = config.max_findings
    if max_findings < 0:
        raise ConfigError("max_findings must be zero or a positive integer")

    known = set(builtin_check_ids())
    checks = dict(base.checks)
    for check_id, settings in config.checks.items():
        if check_id not in known:
            logger.warning("Unknown check id in configuration: %s", check_id)
        current = checks.get(check_id, CheckPolicy.disabled())
        checks[check_id] = CheckPolicy(
            enabled=settings.enabled if settings.enabled is not None else current.enabled,
            severity=(
                _parse_severity(check_id, settings.severity)
                if settings.severity is not None
                else current.severity
            ),
            allow=tuple(settings.allow) if settings.allow else current.allow,
            ignore_publish_false=(
                settings.ignore_publish_false
                if settings.ignore_publish_false is not None
                else current.ignore_publish_false
            ),
        )

    return EffectiveConfig(
        profile=profile,
        scope=scope,
        fail_on=fail_on,
        max_findings=max_findings,
        checks=checks,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_check(check_id: str, raw: Any) -> CheckConfig:
    if raw is None:
        return CheckConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings for {check_id} must be a mapping")
    allow = raw.get("allow")
    if allow is None:
        allow = []
    if not isinstance(allow, list) or not all(isinstance(item, str) for item in allow):
        raise ConfigError(f"`allow` for {check_id} must be a list of glob strings")
    return CheckConfig(
        enabled=_as_bool(raw.get("enabled"), f"{check_id}.enabled"),
        severity=_as_str(raw.get("severity"), f"{check_id}.severity"),
        allow=list(allow),
        ignore_publish_false=_as_bool(
            raw.get("ignore_publish_false"), f"{check_id}.ignore_publish_false"
        ),
    )


def _parse_severity(check_id: str, value: str) -> str:
    severity = _SEVERITY_ALIASES.get(value, value)
    if severity not in SEVERITIES:
        raise ConfigError(
            f"Invalid severity for {check_id}: {value} (expected info|warning|error)"
        )
    return severity


def _parse_fail_on(value: str) -> str:
    fail_on = _SEVERITY_ALIASES.get(value, value)
    if fail_on not in _FAIL_ON_VALUES:
        raise ConfigError(f"Unknown fail_on: {value} (expected error|warning)")
    return fail_on


def _as_str(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"`{key}` must be a string")
    return value


def _as_bool(value: Any, key: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConfigError(f"`{key}` must be true or false")
    return value


def _as_count(value: Any, key: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"`{key}` must be a non-negative integer")
    return value


__all__ = [
    "CONFIG_FILENAME",
    "CheckConfig",
    "ConfigError",
    "DepguardConfig",
    "Overrides",
    "PROFILES",
    "load_config",
    "preset",
    "resolve_config",
]
