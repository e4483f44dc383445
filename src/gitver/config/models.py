"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GITVER__SECTION__KEY)
3. Repo YAML (.gitver/config.yaml)
4. Global YAML (~/.config/gitver/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    GITVER__<SECTION>__<KEY>=<VALUE>

Examples:
    GITVER__LOGGING__LEVEL=DEBUG
    GITVER__VERSION__STRATEGY=pattern
    GITVER__VERSION__MAX_SEARCH_DEPTH=50
    GITVER__VERSION__BRANCHING_POLICIES='[{"pattern": "release/(.*)"}]'
"""

import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from gitver.config.constants import (
    DEFAULT_GIT_COMMIT_ID_LENGTH,
    DEFAULT_NON_QUALIFIER_BRANCHES,
    DEFAULT_TAG_PATTERN,
    DEFAULT_TAG_VERSION_PATTERN,
    DEFAULT_VERSION_PATTERN,
    GIT_COMMIT_ID_MAX_LENGTH,
    GIT_COMMIT_ID_MIN_LENGTH,
    SCRIPT_MAX_LENGTH,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

StrategyName = Literal["maven_like", "pattern", "script"]
LookupPolicyName = Literal["max", "latest", "annotated"]
ScriptKind = Literal["expression"]
TransformKind = Literal[
    "replace_regex",
    "strip_prefix",
    "truncate",
    "remove_unexpected_chars",
    "replace_unexpected_chars",
    "lowercase",
    "uppercase",
    "ignore",
]


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid regular expression {pattern!r}: {e}") from e


def _lower(v: Any) -> Any:
    return v.strip().lower() if isinstance(v, str) else v


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GITVER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports the computed version and timing.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class TransformConfig(BaseModel):
    """One text transformation applied to a branch name.

    May be written as a bare kind name ("lowercase") when it takes no parameters.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: TransformKind
    pattern: str | None = Field(default=None, description="replace_regex: regex to replace.")
    replacement: str = Field(default="", description="replace_regex: replacement text.")
    prefix: str | None = Field(default=None, description="strip_prefix: prefix to remove.")
    length: int | None = Field(default=None, ge=1, description="truncate: max length.")

    @model_validator(mode="before")
    @classmethod
    def from_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": _lower(data)}
        if isinstance(data, dict) and "kind" in data:
            return {**data, "kind": _lower(data["kind"])}
        return data

    @model_validator(mode="after")
    def check_parameters(self) -> "TransformConfig":
        if self.kind == "replace_regex":
            if self.pattern is None:
                raise ValueError("replace_regex requires 'pattern'")
            _compile(self.pattern)
        elif self.kind == "strip_prefix" and not self.prefix:
            raise ValueError("strip_prefix requires a non-empty 'prefix'")
        elif self.kind == "truncate" and self.length is None:
            raise ValueError("truncate requires 'length'")
        return self


class BranchingPolicyConfig(BaseModel):
    """Branch name pattern plus the transformations producing its qualifier.

    The pattern must match the whole branch name. When it has capture groups,
    group 1 is the starting text for the transformations.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pattern: str
    transformations: list[TransformConfig] = Field(
        default_factory=lambda: [
            TransformConfig(kind="remove_unexpected_chars"),
            TransformConfig(kind="lowercase"),
        ]
    )

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        _compile(v)
        return v


class VersionConfig(BaseModel):
    """Options of one version calculation.

    Env vars:
        GITVER__VERSION__STRATEGY: maven_like, pattern or script
        GITVER__VERSION__USE_DIRTY, GITVER__VERSION__USE_SNAPSHOT, ...: flags
        GITVER__VERSION__MAX_SEARCH_DEPTH: BFS depth cap (unset = no cap)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy: StrategyName = Field(
        default="maven_like",
        description="How the version string is assembled from the metadata.",
    )
    tag_pattern: str = Field(
        default=DEFAULT_TAG_PATTERN,
        description="Full-match regex for version tags. Needs three numeric groups "
        "(named major/minor/patch, or the first three groups).",
    )
    lookup_policy: LookupPolicyName = Field(
        default="max",
        description="Tie-break among tags found at the same minimal distance.",
    )
    max_search_depth: int | None = Field(
        default=None,
        ge=1,
        description="Hard cap on the commit graph search depth. Unset means no cap. "
        "TRADEOFF: Low values speed up huge histories but may miss the base tag.",
    )
    use_distance: bool = Field(default=True, description="Append the commit distance.")
    use_dirty: bool = Field(default=False, description="Append 'dirty' on a dirty worktree.")
    use_git_commit_id: bool = Field(default=False, description="Append the abbreviated sha.")
    git_commit_id_length: int = Field(
        default=DEFAULT_GIT_COMMIT_ID_LENGTH,
        ge=GIT_COMMIT_ID_MIN_LENGTH,
        le=GIT_COMMIT_ID_MAX_LENGTH,
    )
    use_git_commit_timestamp: bool = Field(
        default=False, description="Append the HEAD commit timestamp (UTC, yyyyMMddHHmmss)."
    )
    use_snapshot: bool = Field(
        default=False,
        description="Replace all qualifiers by SNAPSHOT when not on a clean tag.",
    )
    auto_increment_patch: bool = Field(
        default=False, description="Increment the patch when HEAD is ahead of the base tag."
    )
    fail_if_dirty: bool = Field(
        default=False, description="Refuse to compute a version on a dirty worktree."
    )
    use_default_branching_policy: bool = Field(
        default=True,
        description="Sanitize the branch name into a qualifier when no policy is configured.",
    )
    non_qualifier_branches: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NON_QUALIFIER_BRANCHES),
        description="Branches that never contribute a qualifier.",
    )
    branching_policies: list[BranchingPolicyConfig] = Field(
        default_factory=list,
        description="Ordered branch policies; the first matching one wins.",
    )
    version_pattern: str = Field(default=DEFAULT_VERSION_PATTERN)
    tag_version_pattern: str = Field(default=DEFAULT_TAG_VERSION_PATTERN)
    script: str | None = Field(
        default=None,
        max_length=SCRIPT_MAX_LENGTH,
        description="Version script body; only valid with strategy 'script'.",
    )
    script_kind: ScriptKind = Field(default="expression")

    @field_validator("strategy", "lookup_policy", "script_kind", mode="before")
    @classmethod
    def normalize_name(cls, v: Any) -> Any:
        return _lower(v)

    @field_validator("tag_pattern")
    @classmethod
    def validate_tag_pattern(cls, v: str) -> str:
        compiled = _compile(v)
        named = {"major", "minor", "patch"}
        if not named.issubset(compiled.groupindex) and compiled.groups < 3:
            raise ValueError(
                f"Tag pattern {v!r} needs three capture groups for major, minor and patch"
            )
        return v

    @model_validator(mode="after")
    def check_script_strategy(self) -> "VersionConfig":
        has_script = bool(self.script and self.script.strip())
        if self.strategy == "script" and not has_script:
            raise ValueError("strategy 'script' requires a non-empty 'script'")
        if self.strategy != "script" and self.script is not None:
            raise ValueError(f"'script' is only allowed with strategy 'script', not {self.strategy!r}")
        return self


class GitverConfig(BaseModel):
    """Root configuration for gitver.

    All settings can be configured via:
    1. Environment variables: GITVER__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
