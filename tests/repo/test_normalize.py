"""Dependency spec normalisation tests."""

from __future__ import annotations

from depguard.models import (
    DependencyTable,
    VersionString,
    WorkspaceInherited,
    describe_spec,
    spec_is_optional,
)
from depguard.repo.normalize import normalize_spec


def test_string_becomes_version_string() -> None:
    assert normalize_spec("1.0") == VersionString(raw="1.0")


def test_workspace_true_becomes_inherited_with_overrides() -> None:
    spec = normalize_spec({"workspace": True, "optional": True, "features": ["derive"]})
    assert isinstance(spec, WorkspaceInherited)
    assert spec.overrides == {"optional": True, "features": ["derive"]}
    assert spec_is_optional(spec) is True


def test_table_fields_are_typed() -> None:
    spec = normalize_spec(
        {
            "version": "1",
            "path": "../x",
            "default-features": False,
            "features": ["a", "b"],
            "optional": True,
            "package": "renamed",
        }
    )
    assert isinstance(spec, DependencyTable)
    assert spec.version == "1"
    assert spec.path == "../x"
    assert spec.default_features is False
    assert spec.features == ("a", "b")
    assert spec.optional is True
    assert spec.extra == {"package": "renamed"}


def test_underscore_default_features_spelling_is_accepted() -> None:
    spec = normalize_spec({"version": "1", "default_features": True})
    assert isinstance(spec, DependencyTable)
    assert spec.default_features is True


def test_workspace_false_stays_a_table() -> None:
    spec = normalize_spec({"workspace": False, "version": "2"})
    assert isinstance(spec, DependencyTable)
    assert spec.workspace_flag is False
    assert spec.version == "2"


def test_wrong_types_are_kept_opaque() -> None:
    spec = normalize_spec({"version": 1, "features": "derive"})
    assert isinstance(spec, DependencyTable)
    assert spec.version is None
    assert spec.features is None
    assert spec.extra == {"version": 1, "features": "derive"}

    opaque = normalize_spec(["not", "a", "spec"])
    assert isinstance(opaque, DependencyTable)
    assert opaque.extra == {"value": ["not", "a", "spec"]}


def test_describe_spec_uses_manifest_spelling() -> None:
    assert describe_spec(VersionString(raw="1")) == {"version": "1"}
    assert describe_spec(WorkspaceInherited(overrides={"optional": True})) == {
        "workspace": True,
        "optional": True,
    }
    table = normalize_spec({"version": "1", "default-features": False, "features": ["x"]})
    assert describe_spec(table) == {
        "version": "1",
        "default-features": False,
        "features": ["x"],
    }
