"""Stable identifiers for checks, finding codes and fix actions.

``check_id`` is a dotted namespace and ``code`` a short snake_case
discriminator. Fix-action tokens are consumed by remediation tooling and are
never renamed once published.
"""

# Checks
CHECK_DEPS_NO_WILDCARDS = "deps.no_wildcards"
CHECK_DEPS_PATH_REQUIRES_VERSION = "deps.path_requires_version"
CHECK_DEPS_PATH_SAFETY = "deps.path_safety"
CHECK_DEPS_WORKSPACE_INHERITANCE = "deps.workspace_inheritance"
CHECK_DEPS_GIT_REQUIRES_VERSION = "deps.git_requires_version"
CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT = "deps.default_features_explicit"
CHECK_DEPS_NO_MULTIPLE_VERSIONS = "deps.no_multiple_versions"
CHECK_DEPS_OPTIONAL_UNUSED = "deps.optional_unused"
CHECK_DEPS_DEV_ONLY_IN_NORMAL = "deps.dev_only_in_normal"

# Codes
CODE_WILDCARD_VERSION = "wildcard_version"
CODE_PATH_WITHOUT_VERSION = "path_without_version"
CODE_ABSOLUTE_PATH = "absolute_path"
CODE_PARENT_ESCAPE = "parent_escape"
CODE_MISSING_WORKSPACE_TRUE = "missing_workspace_true"
CODE_GIT_WITHOUT_VERSION = "git_without_version"
CODE_DEFAULT_FEATURES_IMPLICIT = "default_features_implicit"
CODE_DUPLICATE_DIFFERENT_VERSIONS = "duplicate_different_versions"
CODE_OPTIONAL_NOT_IN_FEATURES = "optional_not_in_features"
CODE_DEV_DEP_IN_NORMAL = "dev_dep_in_normal"

# Tool-level
CHECK_TOOL_RUNTIME = "tool.runtime"
CODE_RUNTIME_ERROR = "runtime_error"
CODE_MANIFEST_PARSE_ERROR = "manifest_parse_error"

CHECK_TOOL_DISCOVERY = "tool.discovery"
CODE_MEMBER_NOT_FOUND = "member_not_found"
CODE_MEMBER_GLOB_UNMATCHED = "member_glob_unmatched"

# Fix actions
FIX_ACTION_PIN_VERSION = "pin_version"
FIX_ACTION_ADD_VERSION_WITH_PATH = "add_version_with_path"
FIX_ACTION_USE_REPO_RELATIVE_PATH = "use_repo_relative_path"
FIX_ACTION_REMOVE_PARENT_ESCAPE = "remove_parent_escape"
FIX_ACTION_USE_WORKSPACE_INHERITANCE = "use_workspace_inheritance"
FIX_ACTION_ADD_VERSION_WITH_GIT = "add_version_with_git"
FIX_ACTION_DECLARE_DEFAULT_FEATURES = "declare_default_features"
FIX_ACTION_CONSOLIDATE_VERSIONS = "consolidate_versions"
FIX_ACTION_REFERENCE_IN_FEATURE = "reference_in_feature"
FIX_ACTION_MOVE_TO_DEV_DEPENDENCIES = "move_to_dev_dependencies"

# (check_id, code) pairs each check can emit.
CHECK_CODES = {
    CHECK_DEPS_NO_WILDCARDS: (CODE_WILDCARD_VERSION,),
    CHECK_DEPS_PATH_REQUIRES_VERSION: (CODE_PATH_WITHOUT_VERSION,),
    CHECK_DEPS_PATH_SAFETY: (CODE_ABSOLUTE_PATH, CODE_PARENT_ESCAPE),
    CHECK_DEPS_WORKSPACE_INHERITANCE: (CODE_MISSING_WORKSPACE_TRUE,),
    CHECK_DEPS_GIT_REQUIRES_VERSION: (CODE_GIT_WITHOUT_VERSION,),
    CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT: (CODE_DEFAULT_FEATURES_IMPLICIT,),
    CHECK_DEPS_NO_MULTIPLE_VERSIONS: (CODE_DUPLICATE_DIFFERENT_VERSIONS,),
    CHECK_DEPS_OPTIONAL_UNUSED: (CODE_OPTIONAL_NOT_IN_FEATURES,),
    CHECK_DEPS_DEV_ONLY_IN_NORMAL: (CODE_DEV_DEP_IN_NORMAL,),
    CHECK_TOOL_RUNTIME: (CODE_RUNTIME_ERROR, CODE_MANIFEST_PARSE_ERROR),
    CHECK_TOOL_DISCOVERY: (CODE_MEMBER_NOT_FOUND, CODE_MEMBER_GLOB_UNMATCHED),
}
