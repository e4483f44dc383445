"""Configuration constants.

Values here are fixed by the version format or by git itself and are not
user-configurable. For configurable values, see models.py (VersionConfig).
"""

# =============================================================================
# Defaults for configurable options
# =============================================================================

DEFAULT_TAG_PATTERN = r"v?(\d+)\.(\d+)\.(\d+)(?:-.*)?"
"""Full-match pattern for version tags: optional 'v', numeric triple, optional suffix."""

DEFAULT_VERSION_PATTERN = "${v}${<meta.QUALIFIED_BRANCH_NAME}${<meta.COMMIT_DISTANCE}"
"""Pattern strategy template used away from a clean tagged commit."""

DEFAULT_TAG_VERSION_PATTERN = "${v}${<meta.QUALIFIED_BRANCH_NAME}"
"""Pattern strategy template used when HEAD is a clean tagged commit."""

DEFAULT_NON_QUALIFIER_BRANCHES = ("master", "main")
"""Branches that never contribute a qualifier."""

DEFAULT_GIT_COMMIT_ID_LENGTH = 8

# =============================================================================
# Protocol/Validation Constants
# =============================================================================

GIT_COMMIT_ID_MIN_LENGTH = 7
GIT_COMMIT_ID_MAX_LENGTH = 40
"""Valid abbreviated commit id range (40 = full sha1)."""

QUALIFIER_MAX_LENGTH = 64
"""Truncation length of the default branching policy."""

UNEXPECTED_CHARS_PATTERN = r"[^A-Za-z0-9_.\-]"
"""Characters that are not safe inside a version qualifier."""

SNAPSHOT_QUALIFIER = "SNAPSHOT"
DIRTY_QUALIFIER = "dirty"

COMMIT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
"""Commit timestamp qualifier format (UTC)."""

SCRIPT_BINDING_NAME = "metadata"
"""Name under which version scripts see the metadata."""

SCRIPT_MAX_LENGTH = 4096
"""Longest accepted version script, in characters."""
