"""Version calculator: orchestrates one version computation for a repository."""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType
from typing import Any

import structlog
from pydantic import ValidationError

from gitver.config.loader import config_error_from_validation
from gitver.config.models import VersionConfig
from gitver.core.errors import ConfigError, DirtyRepositoryError, VersionCalculationError
from gitver.core.logging import clear_calculation_id, set_calculation_id
from gitver.git.facade import RepositoryFacade
from gitver.git.repository import GitRepository
from gitver.version import strategies
from gitver.version.branching import BranchingPolicy, qualify
from gitver.version.metadata import CalculationFacts, MetadataKey, MetadataProvider
from gitver.version.tags import TagMatcher
from gitver.version.walker import CommitGraphWalker

log = structlog.get_logger(__name__)


class GitVersionCalculator:
    """Computes the version of one repository, once.

    Usage::

        with GitVersionCalculator("/path/to/repo", {"use_dirty": True}) as calc:
            version = calc.compute_version()
            sha = calc.query_metadata("GIT_SHA1_FULL")

    The result and its metadata are memoized. Failed computations are not,
    so a later call runs the whole pipeline again.
    """

    def __init__(
        self,
        repository: RepositoryFacade | Path | str,
        config: VersionConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self._config = VersionConfig()
        self._version: str | None = None
        self._metadata: MetadataProvider | None = None
        # Configuration errors surface before the repository is touched
        if config is not None:
            self.configure(config)
        self._owns_repository = isinstance(repository, (str, Path))
        self._repository: RepositoryFacade = (
            GitRepository(repository) if isinstance(repository, (str, Path)) else repository
        )

    @property
    def config(self) -> VersionConfig:
        return self._config

    def configure(self, config: VersionConfig | Mapping[str, Any]) -> GitVersionCalculator:
        """Validate and store the configuration.

        Raises:
            ConfigError: Invalid configuration, or a version was already computed.
        """
        if self._version is not None:
            raise ConfigError.already_computed()
        if isinstance(config, VersionConfig):
            self._config = config
            return self
        try:
            self._config = VersionConfig.model_validate(dict(config))
        except ValidationError as e:
            raise config_error_from_validation(e, prefix="version") from e
        return self

    def compute_version(self) -> str:
        """Compute (or return the memoized) version string.

        Raises:
            RepositoryAccessError: The repository cannot be read or HEAD is unborn.
            DirtyRepositoryError: fail_if_dirty is set and the worktree is dirty.
            ConfigError: A tag or template cannot be interpreted.
            VersionCalculationError: The version script failed.
        """
        if self._version is not None:
            return self._version

        set_calculation_id()
        start = time.perf_counter()
        try:
            metadata = self._collect()
            version = strategies.compute(self._config, metadata)
            metadata.record(MetadataKey.CALCULATED_VERSION, version)
            self._metadata = metadata
            self._version = version
            log.info(
                "version.computed",
                version=version,
                strategy=self._config.strategy,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            return version
        finally:
            clear_calculation_id()

    def query_metadata(self, key: MetadataKey | str) -> str | None:
        """Value of one metadata key, or None when it does not apply.

        Raises:
            VersionCalculationError: compute_version() has not run yet.
            ConfigError: `key` names no metadata.
        """
        if self._metadata is None:
            raise VersionCalculationError.not_computed()
        meta_key = key if isinstance(key, MetadataKey) else MetadataKey.parse(key)
        if meta_key is None:
            raise ConfigError.invalid_value("metadata key", key, "unknown metadata key")
        return self._metadata.get(meta_key)

    def metadata(self) -> dict[str, str]:
        """All applicable metadata of the computed version."""
        if self._metadata is None:
            raise VersionCalculationError.not_computed()
        return {key.value: value for key, value in self._metadata.items()}

    def close(self) -> None:
        if self._owns_repository:
            self._repository.close()

    def __enter__(self) -> GitVersionCalculator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _collect(self) -> MetadataProvider:
        config = self._config
        repo = self._repository

        head = repo.head_commit()
        dirty = repo.is_dirty()
        if dirty and config.fail_if_dirty:
            raise DirtyRepositoryError.for_head(head)

        walker = CommitGraphWalker(
            repo,
            TagMatcher(config.tag_pattern),
            lookup_policy=config.lookup_policy,
            max_depth=config.max_search_depth,
        )
        traversal = walker.walk(head)

        branch = repo.branch_name()
        qualifier = qualify(
            branch,
            [BranchingPolicy.from_config(p) for p in config.branching_policies],
            use_default_policy=config.use_default_branching_policy,
            non_qualifier_branches=config.non_qualifier_branches,
        )
        log.debug(
            "version.facts",
            head=head,
            dirty=dirty,
            branch=branch,
            qualifier=qualifier,
            base_tag=traversal.base_tag.raw_name if traversal.base_tag else None,
            distance=traversal.distance,
        )
        facts = CalculationFacts(
            head=head,
            traversal=traversal,
            dirty=dirty,
            branch_name=branch,
            branch_qualifier=qualifier,
        )
        return MetadataProvider(facts, repo, config)
