"""Core module exports."""

from gitver.core.errors import (
    ConfigError,
    DirtyRepositoryError,
    ErrorCode,
    GitverError,
    RepositoryAccessError,
    VersionCalculationError,
)
from gitver.core.logging import (
    clear_calculation_id,
    configure_logging,
    get_calculation_id,
    get_logger,
    set_calculation_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DirtyRepositoryError",
    "ErrorCode",
    "GitverError",
    "RepositoryAccessError",
    "VersionCalculationError",
    # Logging
    "clear_calculation_id",
    "configure_logging",
    "get_calculation_id",
    "get_logger",
    "set_calculation_id",
]
