"""Version calculation engine."""

from gitver.version.calculator import GitVersionCalculator
from gitver.version.metadata import MetadataKey
from gitver.version.semver import SemanticVersion, Version

__all__ = [
    "GitVersionCalculator",
    "MetadataKey",
    "SemanticVersion",
    "Version",
]
