"""Convert raw TOML dependency values into tagged dependency specs."""

from __future__ import annotations

from typing import Any, Dict

from ..models import DependencySpec, DependencyTable, VersionString, WorkspaceInherited

_STRING_KEYS = ("version", "path", "git", "branch", "tag", "rev")


def normalize_spec(value: Any) -> DependencySpec:
    """Return the spec variant for one dependency value. Never raises."""
    if isinstance(value, str):
        return VersionString(raw=value)
    if not isinstance(value, dict):
        # Arrays, numbers and booleans are not valid declarations; keep them opaque.
        return DependencyTable(extra={"value": value})

    if value.get("workspace") is True:
        overrides = {key: item for key, item in value.items() if key != "workspace"}
        return WorkspaceInherited(overrides=overrides)

    fields: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, item in value.items():
        if key in _STRING_KEYS and isinstance(item, str):
            fields[key] = item
        elif key in ("default-features", "default_features") and isinstance(item, bool):
            fields.setdefault("default_features", item)
        elif key == "optional" and isinstance(item, bool):
            fields["optional"] = item
        elif key == "workspace" and isinstance(item, bool):
            fields["workspace_flag"] = item
        elif key == "features" and _is_str_list(item):
            fields["features"] = tuple(item)
        else:
            extra[key] = item
    return DependencyTable(extra=extra, **fields)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


__all__ = ["normalize_spec"]
