"""Parse Cargo.toml text into manifest models."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..models import (
    SECTION_BUILD,
    SECTION_DEV,
    SECTION_NORMAL,
    DependencyDeclaration,
    DependencySpec,
    ManifestModel,
    PackageMeta,
)
from ..paths import RepoPath
from .lines import KeyLineIndex
from .normalize import normalize_spec

# Table name -> section. The underscore spellings are deprecated but still accepted by cargo.
_SECTION_TABLES: Tuple[Tuple[str, str], ...] = (
    ("dependencies", SECTION_NORMAL),
    ("dev-dependencies", SECTION_DEV),
    ("dev_dependencies", SECTION_DEV),
    ("build-dependencies", SECTION_BUILD),
    ("build_dependencies", SECTION_BUILD),
)


class ManifestParseError(ValueError):
    """Raised when a manifest cannot be decoded or parsed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail


def read_manifest_text(file_path: Path, label: str) -> str:
    """Read a manifest as UTF-8, converting I/O and decode failures."""
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise ManifestParseError(label, f"unable to read manifest: {exc.strerror or exc}") from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestParseError(label, f"manifest is not valid UTF-8: {exc.reason}") from exc


def load_document(path: str, text: str) -> Dict[str, Any]:
    """Parse TOML text, raising :class:`ManifestParseError` on any failure."""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(path, f"invalid TOML: {exc}") from exc
    except RecursionError as exc:
        raise ManifestParseError(path, "TOML nesting is too deep") from exc


def parse_member_manifest(path: RepoPath, text: str) -> ManifestModel:
    document = load_document(str(path), text)
    return manifest_from_document(path, document, KeyLineIndex.build(text))


def parse_root_manifest(
    path: RepoPath, text: str
) -> Tuple[Dict[str, DependencySpec], ManifestModel]:
    """Parse the root manifest, returning ``[workspace.dependencies]`` and the model."""
    document = load_document(str(path), text)
    index = KeyLineIndex.build(text)
    return workspace_dependencies(document), manifest_from_document(path, document, index)


def workspace_dependencies(document: Dict[str, Any]) -> Dict[str, DependencySpec]:
    workspace = document.get("workspace")
    if not isinstance(workspace, dict):
        return {}
    table = workspace.get("dependencies")
    if not isinstance(table, dict):
        return {}
    return {str(name): normalize_spec(value) for name, value in table.items()}


def manifest_from_document(
    path: RepoPath, document: Dict[str, Any], index: KeyLineIndex
) -> ManifestModel:
    label = str(path)
    package = _parse_package(label, document.get("package"))
    features = _parse_features(document.get("features"))

    dependencies: List[DependencyDeclaration] = []
    dependencies.extend(_collect_sections(label, document, (), None, index))

    targets = document.get("target")
    if targets is not None and not isinstance(targets, dict):
        raise ManifestParseError(label, "`target` must be a table")
    for target_key, target_table in (targets or {}).items():
        if not isinstance(target_table, dict):
            continue
        dependencies.extend(
            _collect_sections(label, target_table, ("target", target_key), target_key, index)
        )

    return ManifestModel(path=path, package=package, dependencies=dependencies, features=features)


def _parse_package(label: str, raw: Any) -> Optional[PackageMeta]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ManifestParseError(label, "`package` must be a table")
    name = raw.get("name")
    if not isinstance(name, str):
        raise ManifestParseError(label, "`package.name` must be a string")
    return PackageMeta(name=name, publish=_publish_flag(raw.get("publish")))


def _publish_flag(value: Any) -> bool:
    # `publish = ["registry"]` restricts registries; an empty list disables publishing.
    if isinstance(value, bool):
        return value
    if isinstance(value, list):
        return bool(value)
    return True


def _parse_features(raw: Any) -> Dict[str, List[str]]:
    if not isinstance(raw, dict):
        return {}
    features: Dict[str, List[str]] = {}
    for name, values in raw.items():
        if isinstance(values, list):
            features[str(name)] = [item for item in values if isinstance(item, str)]
    return features


def _collect_sections(
    label: str,
    container: Dict[str, Any],
    prefix: Tuple[str, ...],
    target: Optional[str],
    index: KeyLineIndex,
) -> List[DependencyDeclaration]:
    declarations: List[DependencyDeclaration] = []
    for table_name, section in _SECTION_TABLES:
        table = container.get(table_name)
        if table is None:
            continue
        if not isinstance(table, dict):
            where = ".".join(prefix + (table_name,))
            raise ManifestParseError(label, f"`{where}` must be a table")
        for name, value in table.items():
            declarations.append(
                DependencyDeclaration(
                    section=section,
                    name=str(name),
                    spec=normalize_spec(value),
                    target=target,
                    line=index.line_for(prefix + (table_name, name)),
                )
            )
    return declarations


__all__ = [
    "ManifestParseError",
    "load_document",
    "manifest_from_document",
    "parse_member_manifest",
    "parse_root_manifest",
    "read_manifest_text",
    "workspace_dependencies",
]
