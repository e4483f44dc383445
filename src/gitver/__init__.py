"""gitver - deterministic project versions computed from git history."""

from gitver.core.errors import (
    ConfigError,
    DirtyRepositoryError,
    GitverError,
    RepositoryAccessError,
    VersionCalculationError,
)
from gitver.version import GitVersionCalculator, MetadataKey, SemanticVersion, Version

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DirtyRepositoryError",
    "GitVersionCalculator",
    "GitverError",
    "MetadataKey",
    "RepositoryAccessError",
    "SemanticVersion",
    "Version",
    "VersionCalculationError",
    "__version__",
]
