"""Version strategies: one evaluation function per strategy name."""

from __future__ import annotations

from collections.abc import Callable

from gitver.config.constants import DIRTY_QUALIFIER, SNAPSHOT_QUALIFIER
from gitver.config.models import StrategyName, VersionConfig
from gitver.version.metadata import MetadataKey, MetadataProvider, MetadataView
from gitver.version.patterns import VersionTemplate
from gitver.version.script import run_script
from gitver.version.semver import SemanticVersion, Version

Strategy = Callable[[VersionConfig, MetadataProvider], Version | str]


def working_version(config: VersionConfig, metadata: MetadataProvider) -> SemanticVersion:
    """Base version, with the patch bumped when HEAD is ahead of the base tag."""
    facts = metadata.facts
    base = facts.base_version
    if config.auto_increment_patch and facts.traversal.distance > 0:
        return base.next_patch()
    return base


def maven_like(config: VersionConfig, metadata: MetadataProvider) -> Version:
    facts = metadata.facts
    if facts.on_clean_tag:
        return Version(facts.base_version)

    qualifiers: list[str | None] = [facts.branch_qualifier]
    if config.use_distance and not facts.traversal.is_on_head:
        qualifiers.append(metadata.get(MetadataKey.COMMIT_DISTANCE))
    if config.use_git_commit_id:
        qualifiers.append(metadata.get(MetadataKey.GIT_SHA1_ABBREVIATED))
    if config.use_dirty and facts.dirty:
        qualifiers.append(DIRTY_QUALIFIER)
    if config.use_git_commit_timestamp:
        qualifiers.append(metadata.get(MetadataKey.COMMIT_TIMESTAMP))

    base = working_version(config, metadata)
    if config.use_snapshot:
        return Version(base, (SNAPSHOT_QUALIFIER,))
    return Version(base, tuple(q for q in qualifiers if q))


def pattern(config: VersionConfig, metadata: MetadataProvider) -> str:
    if metadata.facts.on_clean_tag:
        template = VersionTemplate(config.tag_version_pattern)
    else:
        template = VersionTemplate(config.version_pattern)
    return template.render(working_version(config, metadata), metadata)


def script(config: VersionConfig, metadata: MetadataProvider) -> Version:
    # The config validator guarantees a script body for this strategy.
    return run_script(config.script or "", MetadataView(metadata))


_STRATEGIES: dict[StrategyName, Strategy] = {
    "maven_like": maven_like,
    "pattern": pattern,
    "script": script,
}


def compute(config: VersionConfig, metadata: MetadataProvider) -> str:
    """Run the configured strategy and render its result."""
    return str(_STRATEGIES[config.strategy](config, metadata))
