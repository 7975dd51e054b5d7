"""Core data models shared across depguard components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .paths import RepoPath

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"
SEVERITIES = (SEVERITY_INFO, SEVERITY_WARNING, SEVERITY_ERROR)

VERDICT_PASS = "pass"
VERDICT_WARN = "warn"
VERDICT_FAIL = "fail"

SECTION_NORMAL = "normal"
SECTION_DEV = "dev"
SECTION_BUILD = "build"

_SECTION_TABLE_NAMES = {
    SECTION_NORMAL: "dependencies",
    SECTION_DEV: "dev-dependencies",
    SECTION_BUILD: "build-dependencies",
}


def section_table_name(section: str) -> str:
    """Return the manifest table name (``dev-dependencies``...) for a section."""
    return _SECTION_TABLE_NAMES[section]


# Dependency specs. A declaration is exactly one of these three shapes.


@dataclass(frozen=True)
class VersionString:
    """``name = "1.0"``"""

    raw: str


@dataclass(frozen=True)
class DependencyTable:
    """``name = { version = "1", path = "../x", ... }`` or ``[dependencies.name]``."""

    version: Optional[str] = None
    path: Optional[str] = None
    git: Optional[str] = None
    branch: Optional[str] = None
    tag: Optional[str] = None
    rev: Optional[str] = None
    default_features: Optional[bool] = None
    optional: Optional[bool] = None
    workspace_flag: Optional[bool] = None
    features: Optional[Tuple[str, ...]] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class WorkspaceInherited:
    """``name = { workspace = true, ... }``; ``overrides`` holds the other keys."""

    overrides: Dict[str, Any] = field(default_factory=dict, compare=False)


DependencySpec = Union[VersionString, DependencyTable, WorkspaceInherited]


def _unknown_spec(spec: object) -> TypeError:
    return TypeError(f"Unsupported dependency spec: {spec!r}")


def spec_version(spec: DependencySpec) -> Optional[str]:
    if isinstance(spec, VersionString):
        return spec.raw
    if isinstance(spec, DependencyTable):
        return spec.version
    if isinstance(spec, WorkspaceInherited):
        return None
    raise _unknown_spec(spec)


def spec_path(spec: DependencySpec) -> Optional[str]:
    if isinstance(spec, VersionString):
        return None
    if isinstance(spec, DependencyTable):
        return spec.path
    if isinstance(spec, WorkspaceInherited):
        return None
    raise _unknown_spec(spec)


def spec_git(spec: DependencySpec) -> Optional[str]:
    if isinstance(spec, VersionString):
        return None
    if isinstance(spec, DependencyTable):
        return spec.git
    if isinstance(spec, WorkspaceInherited):
        return None
    raise _unknown_spec(spec)


def spec_is_optional(spec: DependencySpec) -> bool:
    if isinstance(spec, VersionString):
        return False
    if isinstance(spec, DependencyTable):
        return spec.optional is True
    if isinstance(spec, WorkspaceInherited):
        return spec.overrides.get("optional") is True
    raise _unknown_spec(spec)


def is_workspace_inherited(spec: DependencySpec) -> bool:
    if isinstance(spec, (VersionString, DependencyTable)):
        return False
    if isinstance(spec, WorkspaceInherited):
        return True
    raise _unknown_spec(spec)


def describe_spec(spec: DependencySpec) -> Dict[str, Any]:
    """Return a JSON-ready view of a spec using manifest key spelling."""
    if isinstance(spec, VersionString):
        return {"version": spec.raw}
    if isinstance(spec, WorkspaceInherited):
        payload: Dict[str, Any] = {"workspace": True}
        payload.update(_json_ready(spec.overrides))
        return payload
    if isinstance(spec, DependencyTable):
        payload = {}
        for key, value in (
            ("version", spec.version),
            ("path", spec.path),
            ("workspace", spec.workspace_flag),
            ("git", spec.git),
            ("branch", spec.branch),
            ("tag", spec.tag),
            ("rev", spec.rev),
            ("default-features", spec.default_features),
            ("optional", spec.optional),
        ):
            if value is not None:
                payload[key] = value
        if spec.features is not None:
            payload["features"] = list(spec.features)
        payload.update(_json_ready(spec.extra))
        return payload
    raise _unknown_spec(spec)


def _json_ready(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    # tomllib yields datetime/date/time values for TOML date literals.
    return str(value)


@dataclass(frozen=True)
class DependencyDeclaration:
    """One dependency key in one manifest section."""

    section: str
    name: str
    spec: DependencySpec
    target: Optional[str] = None
    line: Optional[int] = None


@dataclass(frozen=True)
class PackageMeta:
    name: str
    publish: bool = True


@dataclass
class ManifestModel:
    """Parsed view of a single Cargo.toml."""

    path: RepoPath
    package: Optional[PackageMeta] = None
    dependencies: List[DependencyDeclaration] = field(default_factory=list)
    features: Dict[str, List[str]] = field(default_factory=dict)

    def is_publishable(self) -> bool:
        return self.package.publish if self.package is not None else False

    def package_name(self) -> Optional[str]:
        return self.package.name if self.package is not None else None


@dataclass(frozen=True)
class ModelIssue:
    """Non-fatal problem found while building the workspace model."""

    check_id: str
    code: str
    severity: str
    message: str
    path: Optional[RepoPath] = None
    detail: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass
class WorkspaceModel:
    """Root manifest plus resolved members, ordered by manifest path."""

    repo_root: Path
    workspace_dependencies: Dict[str, DependencySpec] = field(default_factory=dict)
    manifests: List[ManifestModel] = field(default_factory=list)
    issues: List[ModelIssue] = field(default_factory=list)

    def dependency_count(self) -> int:
        return sum(len(manifest.dependencies) for manifest in self.manifests)


@dataclass(frozen=True)
class Location:
    path: RepoPath
    line: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"path": str(self.path)}
        if self.line is not None:
            payload["line"] = self.line
        return payload


@dataclass(frozen=True)
class Finding:
    """A single reported violation."""

    severity: str
    check_id: str
    code: str
    message: str
    location: Optional[Location] = None
    help: Optional[str] = None
    fingerprint: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "severity": self.severity,
            "check_id": self.check_id,
            "code": self.code,
            "message": self.message,
        }
        if self.location is not None:
            payload["location"] = self.location.to_dict()
        if self.help is not None:
            payload["help"] = self.help
        if self.fingerprint is not None:
            payload["fingerprint"] = self.fingerprint
        if self.data:
            payload["data"] = self.data
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Finding":
        location_payload = payload.get("location")
        location = None
        if isinstance(location_payload, dict) and isinstance(location_payload.get("path"), str):
            line = location_payload.get("line")
            location = Location(
                path=RepoPath.new(location_payload["path"]),
                line=line if isinstance(line, int) else None,
            )
        data = payload.get("data")
        return cls(
            severity=str(payload.get("severity", SEVERITY_INFO)),
            check_id=str(payload.get("check_id", "")),
            code=str(payload.get("code", "")),
            message=str(payload.get("message", "")),
            location=location,
            help=payload.get("help") if isinstance(payload.get("help"), str) else None,
            fingerprint=(
                payload.get("fingerprint") if isinstance(payload.get("fingerprint"), str) else None
            ),
            data=data if isinstance(data, dict) else {},
        )


@dataclass(frozen=True)
class SeverityCounts:
    info: int = 0
    warn: int = 0
    error: int = 0

    @classmethod
    def from_findings(cls, findings: List[Finding]) -> "SeverityCounts":
        info = sum(1 for finding in findings if finding.severity == SEVERITY_INFO)
        warn = sum(1 for finding in findings if finding.severity == SEVERITY_WARNING)
        error = sum(1 for finding in findings if finding.severity == SEVERITY_ERROR)
        return cls(info=info, warn=warn, error=error)

    def to_dict(self) -> Dict[str, int]:
        return {"info": self.info, "warn": self.warn, "error": self.error}


@dataclass(frozen=True)
class Verdict:
    status: str
    counts: SeverityCounts = field(default_factory=SeverityCounts)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "counts": self.counts.to_dict()}
