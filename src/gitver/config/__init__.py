"""Config module exports."""

from gitver.config.loader import config_error_from_validation, load_config
from gitver.config.models import (
    BranchingPolicyConfig,
    GitverConfig,
    LoggingConfig,
    LogOutputConfig,
    TransformConfig,
    VersionConfig,
)

__all__ = [
    "load_config",
    "config_error_from_validation",
    "GitverConfig",
    "VersionConfig",
    "BranchingPolicyConfig",
    "TransformConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
