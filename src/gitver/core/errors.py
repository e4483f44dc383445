"""gitver error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Repository
- 4xxx: Calculation

Every error is terminal for the current calculation. Nothing here is retried.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_UNKNOWN_PLACEHOLDER = 2005
    CONFIG_ALREADY_COMPUTED = 2006

    # Repository (3xxx)
    REPOSITORY_NOT_FOUND = 3001
    REPOSITORY_READ_FAILED = 3002
    REPOSITORY_UNBORN_HEAD = 3003
    REPOSITORY_DIRTY = 3004

    # Calculation (4xxx)
    CALCULATION_SCRIPT_FAILED = 4001
    CALCULATION_INVALID_OUTPUT = 4002
    CALCULATION_NOT_COMPUTED = 4003


@dataclass(frozen=True, slots=True)
class GitverError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(GitverError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def unknown_placeholder(cls, placeholder: str, template: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_PLACEHOLDER,
            message=f"Unknown placeholder '${{{placeholder}}}' in pattern {template!r}",
            details={"placeholder": placeholder, "template": template},
        )

    @classmethod
    def already_computed(cls) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_ALREADY_COMPUTED,
            message="Calculator already computed a version; create a new calculator to reconfigure",
        )


class RepositoryAccessError(GitverError):
    """Underlying repository could not be opened or read."""

    @classmethod
    def not_a_repository(cls, path: str) -> "RepositoryAccessError":
        return cls(
            code=ErrorCode.REPOSITORY_NOT_FOUND,
            message=f"Not a git repository: {path}",
            details={"path": path},
        )

    @classmethod
    def read_failed(cls, operation: str, reason: str) -> "RepositoryAccessError":
        return cls(
            code=ErrorCode.REPOSITORY_READ_FAILED,
            message=f"{operation} failed: {reason}",
            details={"operation": operation, "reason": reason},
        )

    @classmethod
    def unborn_head(cls) -> "RepositoryAccessError":
        return cls(
            code=ErrorCode.REPOSITORY_UNBORN_HEAD,
            message="HEAD has no commits (unborn branch)",
        )


class DirtyRepositoryError(GitverError):
    """Repository has uncommitted changes and fail_if_dirty is set."""

    @classmethod
    def for_head(cls, head: str) -> "DirtyRepositoryError":
        return cls(
            code=ErrorCode.REPOSITORY_DIRTY,
            message="Repository is dirty: uncommitted changes on top of " + head[:8],
            details={"head": head},
        )


class VersionCalculationError(GitverError):
    """Script execution or output failure, or calculator misuse."""

    @classmethod
    def script_failed(cls, reason: str) -> "VersionCalculationError":
        return cls(
            code=ErrorCode.CALCULATION_SCRIPT_FAILED,
            message=f"Version script failed: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def invalid_output(cls, output: str, reason: str) -> "VersionCalculationError":
        return cls(
            code=ErrorCode.CALCULATION_INVALID_OUTPUT,
            message=f"Invalid version script output {output!r}: {reason}",
            details={"output": output, "reason": reason},
        )

    @classmethod
    def not_computed(cls) -> "VersionCalculationError":
        return cls(
            code=ErrorCode.CALCULATION_NOT_COMPUTED,
            message="Metadata is only available after compute_version() has run",
        )

