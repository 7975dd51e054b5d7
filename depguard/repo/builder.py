"""Assemble the workspace model from the root manifest and its members."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..ids import CHECK_TOOL_RUNTIME, CODE_MANIFEST_PARSE_ERROR
from ..logging import get_logger
from ..models import SEVERITY_ERROR, ManifestModel, ModelIssue, WorkspaceModel
from ..paths import RepoPath
from .discover import MANIFEST_NAME, ROOT_MANIFEST, discover_from_document
from .lines import KeyLineIndex
from .parse import (
    ManifestParseError,
    load_document,
    manifest_from_document,
    parse_member_manifest,
    read_manifest_text,
    workspace_dependencies,
)

logger = get_logger("builder")


def build_workspace_model(
    repo_root: Path, changed_files: Optional[Iterable[str]] = None
) -> WorkspaceModel:
    """Build the model for ``repo_root``.

    ``changed_files`` switches to diff scope: the root manifest is always parsed
    (it owns ``[workspace.dependencies]``) and members are limited to manifests
    present in the changed-file list. A malformed root manifest raises
    :class:`ManifestParseError`; malformed members are recorded as issues.
    """
    root_text = read_manifest_text(repo_root / MANIFEST_NAME, str(ROOT_MANIFEST))
    document = load_document(str(ROOT_MANIFEST), root_text)
    root_model = manifest_from_document(ROOT_MANIFEST, document, KeyLineIndex.build(root_text))

    discovery = discover_from_document(repo_root, document)
    members = [path for path in discovery.manifests if path != ROOT_MANIFEST]
    if changed_files is not None:
        changed: Set[RepoPath] = {RepoPath.new(path) for path in changed_files}
        members = [path for path in members if path in changed]
        logger.debug("Diff scope: %d changed member manifest(s)", len(members))

    manifests: List[ManifestModel] = [root_model]
    issues: List[ModelIssue] = list(discovery.issues)
    for path in members:
        try:
            text = read_manifest_text(repo_root / str(path), str(path))
            manifests.append(parse_member_manifest(path, text))
        except ManifestParseError as exc:
            logger.warning("Skipping %s: %s", path, exc.detail)
            issues.append(
                ModelIssue(
                    check_id=CHECK_TOOL_RUNTIME,
                    code=CODE_MANIFEST_PARSE_ERROR,
                    severity=SEVERITY_ERROR,
                    message=f"failed to parse {path}: {exc.detail}",
                    path=path,
                    detail={"error": exc.detail},
                )
            )

    manifests.sort(key=lambda manifest: manifest.path)
    model = WorkspaceModel(
        repo_root=repo_root,
        workspace_dependencies=workspace_dependencies(document),
        manifests=manifests,
        issues=issues,
    )
    logger.debug(
        "Built model with %d manifest(s) and %d dependency declaration(s)",
        len(model.manifests),
        model.dependency_count(),
    )
    return model


__all__ = ["build_workspace_model"]
