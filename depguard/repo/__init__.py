"""Workspace discovery, manifest parsing and model building."""

from .builder import build_workspace_model
from .discover import DiscoveryResult, discover_manifests
from .parse import ManifestParseError, parse_member_manifest, parse_root_manifest

__all__ = [
    "DiscoveryResult",
    "ManifestParseError",
    "build_workspace_model",
    "discover_manifests",
    "parse_member_manifest",
    "parse_root_manifest",
]
