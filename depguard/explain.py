"""Human-readable explanations for every check id and finding code."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from . import ids


@dataclass(frozen=True)
class Explanation:
    title: str
    description: str
    remediation: str
    before: str
    after: str


_NO_WILDCARDS = Explanation(
    title="No Wildcard Versions",
    description=(
        "Flags dependencies whose version requirement contains `*`, such as `*` or `1.*`.\n\n"
        "A wildcard lets cargo pick any release, including breaking ones, so builds are\n"
        "not reproducible over time. crates.io also refuses to publish crates that\n"
        "depend on wildcard versions."
    ),
    remediation=(
        "Replace the wildcard with an explicit semver requirement:\n"
        "- `1.2.3` or `^1.2.3` for compatible updates\n"
        "- `~1.2.3` for patch updates only\n"
        "- `=1.2.3` for an exact pin"
    ),
    before='[dependencies]\nserde = "*"\ntokio = "1.*"',
    after='[dependencies]\nserde = "1.0"\ntokio = "1.35"',
)

_PATH_REQUIRES_VERSION = Explanation(
    title="Path Dependencies Require Version",
    description=(
        "Flags `path` dependencies without a `version` in crates that can be published.\n\n"
        "cargo drops the `path` key when publishing and resolves the dependency from the\n"
        "registry, so a missing version makes `cargo publish` fail. Crates with\n"
        "`publish = false` are skipped unless `ignore_publish_false` is set."
    ),
    remediation=(
        "Add a version next to the path, inherit it from the workspace, or mark the\n"
        "crate as unpublishable with `publish = false`."
    ),
    before='[dependencies]\nmy-lib = { path = "../my-lib" }',
    after='[dependencies]\nmy-lib = { path = "../my-lib", version = "0.1.0" }',
)

_PATH_SAFETY = Explanation(
    title="Path Dependency Safety",
    description=(
        "Flags path dependencies that are absolute (`/opt/lib`, `C:\\lib`) or whose `..`\n"
        "segments climb above the repository root.\n\n"
        "Such paths only resolve on the author's machine; CI and other contributors\n"
        "cannot build the workspace."
    ),
    remediation=(
        "Keep path dependencies inside the repository and relative to the manifest.\n"
        "For code that lives elsewhere, depend on a published or git version instead."
    ),
    before=(
        "[dependencies]\n"
        'my-lib = { path = "/home/user/code/my-lib" }\n'
        'other = { path = "../../../outside/other" }'
    ),
    after=(
        "[dependencies]\n"
        'my-lib = { path = "../my-lib" }\n'
        'other = { git = "https://github.com/org/other" }'
    ),
)

_WORKSPACE_INHERITANCE = Explanation(
    title="Workspace Dependency Inheritance",
    description=(
        "Flags member dependencies that are also declared in `[workspace.dependencies]`\n"
        "but restate their own spec instead of using `workspace = true`.\n\n"
        "Inheriting keeps a single source of truth for versions across the workspace."
    ),
    remediation=(
        "Declare the dependency as `name = { workspace = true }` (local `features` and\n"
        "`optional` may still be added). Allow-list the name if a different version is\n"
        "intentional."
    ),
    before=(
        "# Cargo.toml\n[workspace.dependencies]\nserde = \"1.0\"\n\n"
        "# crates/app/Cargo.toml\n[dependencies]\nserde = \"1.0\""
    ),
    after=(
        "# Cargo.toml\n[workspace.dependencies]\nserde = \"1.0\"\n\n"
        "# crates/app/Cargo.toml\n[dependencies]\n"
        'serde = { workspace = true, features = ["derive"] }'
    ),
)

_GIT_REQUIRES_VERSION = Explanation(
    title="Git Dependencies Require Version",
    description=(
        "Flags `git` dependencies without a `version` in crates that can be published.\n\n"
        "Like path dependencies, git sources are stripped on publish; without a version\n"
        "the published crate cannot resolve the dependency."
    ),
    remediation=(
        "Add the version that the git revision corresponds to, inherit the dependency\n"
        "from the workspace, or mark the crate `publish = false`."
    ),
    before='[dependencies]\nfoo = { git = "https://github.com/org/foo" }',
    after='[dependencies]\nfoo = { git = "https://github.com/org/foo", version = "0.3" }',
)

_DEFAULT_FEATURES_EXPLICIT = Explanation(
    title="Explicit Default Features",
    description=(
        "Flags table dependencies that set `features`, `optional`, `path` or `git` but\n"
        "leave `default-features` implicit.\n\n"
        "Once a dependency is configured inline, stating whether its default features\n"
        "are wanted makes feature unification predictable."
    ),
    remediation="Add `default-features = true` or `default-features = false`.",
    before='[dependencies]\ntokio = { version = "1", features = ["rt"] }',
    after='[dependencies]\ntokio = { version = "1", default-features = false, features = ["rt"] }',
)

_NO_MULTIPLE_VERSIONS = Explanation(
    title="No Multiple Versions",
    description=(
        "Flags crates that are requested with two or more different version strings\n"
        "across the workspace's manifests.\n\n"
        "Diverging requirements can compile several copies of the same crate and make\n"
        "upgrades uneven."
    ),
    remediation=(
        "Declare the crate once in `[workspace.dependencies]` and inherit it in every\n"
        "member with `workspace = true`."
    ),
    before=(
        "# crates/a/Cargo.toml\n[dependencies]\nregex = \"1.9\"\n\n"
        "# crates/b/Cargo.toml\n[dependencies]\nregex = \"1.10\""
    ),
    after=(
        "# Cargo.toml\n[workspace.dependencies]\nregex = \"1.10\"\n\n"
        "# crates/a/Cargo.toml and crates/b/Cargo.toml\n[dependencies]\n"
        "regex = { workspace = true }"
    ),
)

_OPTIONAL_UNUSED = Explanation(
    title="Optional Dependencies Must Be Used",
    description=(
        "Flags `optional = true` dependencies that no entry in `[features]` enables.\n\n"
        "References count in any of the forms `dep:name`, `name/feature`,\n"
        "`name?/feature` or a bare `name`. An optional dependency that nothing enables\n"
        "is dead weight in the manifest."
    ),
    remediation="Reference the dependency from a feature, or drop `optional = true`.",
    before='[dependencies]\nserde = { version = "1", optional = true }\n\n[features]\ndefault = []',
    after=(
        '[dependencies]\nserde = { version = "1", optional = true }\n\n'
        '[features]\nserde = ["dep:serde"]'
    ),
)

_DEV_ONLY_IN_NORMAL = Explanation(
    title="Dev-Only Crates In Normal Dependencies",
    description=(
        "Flags well-known test, mocking and benchmarking crates (proptest, mockall,\n"
        "criterion, tempfile, ...) declared under `[dependencies]`.\n\n"
        "They end up in every downstream build even though only tests use them."
    ),
    remediation="Move the dependency to `[dev-dependencies]`.",
    before='[dependencies]\nproptest = "1"',
    after='[dev-dependencies]\nproptest = "1"',
)

_TOOL_RUNTIME = Explanation(
    title="Tool Runtime Error",
    description=(
        "depguard could not complete normally: a manifest failed to parse, or an\n"
        "internal error stopped the run. A malformed member manifest is skipped and the\n"
        "rest of the workspace is still checked."
    ),
    remediation="Fix the reported manifest or error and re-run depguard.",
    before='[dependencies\nserde = "1"',
    after='[dependencies]\nserde = "1"',
)

_TOOL_DISCOVERY = Explanation(
    title="Workspace Discovery",
    description=(
        "An entry of `workspace.members` did not resolve: a literal path without a\n"
        "Cargo.toml, a glob that matched nothing, or a pattern outside the repository."
    ),
    remediation="Fix or remove the member entry in the root Cargo.toml.",
    before='[workspace]\nmembers = ["crates/*", "tools/missing"]',
    after='[workspace]\nmembers = ["crates/*"]',
)

_CHECKS: Dict[str, Explanation] = {
    ids.CHECK_DEPS_NO_WILDCARDS: _NO_WILDCARDS,
    ids.CHECK_DEPS_PATH_REQUIRES_VERSION: _PATH_REQUIRES_VERSION,
    ids.CHECK_DEPS_PATH_SAFETY: _PATH_SAFETY,
    ids.CHECK_DEPS_WORKSPACE_INHERITANCE: _WORKSPACE_INHERITANCE,
    ids.CHECK_DEPS_GIT_REQUIRES_VERSION: _GIT_REQUIRES_VERSION,
    ids.CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT: _DEFAULT_FEATURES_EXPLICIT,
    ids.CHECK_DEPS_NO_MULTIPLE_VERSIONS: _NO_MULTIPLE_VERSIONS,
    ids.CHECK_DEPS_OPTIONAL_UNUSED: _OPTIONAL_UNUSED,
    ids.CHECK_DEPS_DEV_ONLY_IN_NORMAL: _DEV_ONLY_IN_NORMAL,
    ids.CHECK_TOOL_RUNTIME: _TOOL_RUNTIME,
    ids.CHECK_TOOL_DISCOVERY: _TOOL_DISCOVERY,
}

_CODES: Dict[str, Explanation] = {
    ids.CODE_WILDCARD_VERSION: replace(_NO_WILDCARDS, title="Wildcard Version"),
    ids.CODE_PATH_WITHOUT_VERSION: replace(_PATH_REQUIRES_VERSION, title="Path Without Version"),
    ids.CODE_ABSOLUTE_PATH: replace(
        _PATH_SAFETY,
        title="Absolute Path Dependency",
        before='[dependencies]\nmy-lib = { path = "/home/user/projects/my-lib" }',
        after='[dependencies]\nmy-lib = { path = "../my-lib" }',
    ),
    ids.CODE_PARENT_ESCAPE: replace(
        _PATH_SAFETY,
        title="Path Escapes Repository Root",
        before='# crates/app/Cargo.toml\n[dependencies]\nshared = { path = "../../../shared" }',
        after='# crates/app/Cargo.toml\n[dependencies]\nshared = { path = "../shared" }',
    ),
    ids.CODE_MISSING_WORKSPACE_TRUE: replace(
        _WORKSPACE_INHERITANCE, title="Missing workspace = true"
    ),
    ids.CODE_GIT_WITHOUT_VERSION: replace(_GIT_REQUIRES_VERSION, title="Git Without Version"),
    ids.CODE_DEFAULT_FEATURES_IMPLICIT: replace(
        _DEFAULT_FEATURES_EXPLICIT, title="Implicit Default Features"
    ),
    ids.CODE_DUPLICATE_DIFFERENT_VERSIONS: replace(
        _NO_MULTIPLE_VERSIONS, title="Duplicate Different Versions"
    ),
    ids.CODE_OPTIONAL_NOT_IN_FEATURES: replace(
        _OPTIONAL_UNUSED, title="Optional Dependency Not In Features"
    ),
    ids.CODE_DEV_DEP_IN_NORMAL: replace(_DEV_ONLY_IN_NORMAL, title="Dev Dependency In Normal"),
    ids.CODE_RUNTIME_ERROR: replace(_TOOL_RUNTIME, title="Runtime Error"),
    ids.CODE_MANIFEST_PARSE_ERROR: replace(_TOOL_RUNTIME, title="Manifest Parse Error"),
    ids.CODE_MEMBER_NOT_FOUND: replace(_TOOL_DISCOVERY, title="Workspace Member Not Found"),
    ids.CODE_MEMBER_GLOB_UNMATCHED: replace(
        _TOOL_DISCOVERY, title="Workspace Member Glob Unmatched"
    ),
}


def lookup_explanation(identifier: str) -> Optional[Explanation]:
    """Look up a check id first, then a code."""
    return _CHECKS.get(identifier) or _CODES.get(identifier)


def all_check_ids() -> List[str]:
    return list(_CHECKS)


def all_codes() -> List[str]:
    return list(_CODES)


def format_explanation(identifier: str, explanation: Explanation) -> str:
    """Render an explanation as plain text for the terminal."""
    return "\n".join(
        [
            f"{explanation.title} ({identifier})",
            "",
            explanation.description,
            "",
            "Remediation:",
            explanation.remediation,
            "",
            "Before:",
            _indent(explanation.before),
            "",
            "After:",
            _indent(explanation.after),
            "",
        ]
    )


def _indent(block: str) -> str:
    return "\n".join(f"    {line}" if line else "" for line in block.splitlines())


__all__ = ["Explanation", "all_check_ids", "all_codes", "format_explanation", "lookup_explanation"]
