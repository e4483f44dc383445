"""Lazily computed, named metadata of one version calculation."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum

from gitver.config.constants import COMMIT_TIMESTAMP_FORMAT, DIRTY_QUALIFIER
from gitver.config.models import VersionConfig
from gitver.git.facade import RepositoryFacade
from gitver.version.semver import SemanticVersion
from gitver.version.walker import TraversalResult


class MetadataKey(StrEnum):
    """Closed set of metadata names, shared by strategies, scripts and callers."""

    CALCULATED_VERSION = "CALCULATED_VERSION"
    BASE_VERSION = "BASE_VERSION"
    BASE_TAG = "BASE_TAG"
    BASE_TAG_TYPE = "BASE_TAG_TYPE"
    BASE_COMMIT_ON_HEAD = "BASE_COMMIT_ON_HEAD"
    CURRENT_VERSION_MAJOR = "CURRENT_VERSION_MAJOR"
    CURRENT_VERSION_MINOR = "CURRENT_VERSION_MINOR"
    CURRENT_VERSION_PATCH = "CURRENT_VERSION_PATCH"
    NEXT_MAJOR_VERSION = "NEXT_MAJOR_VERSION"
    NEXT_MINOR_VERSION = "NEXT_MINOR_VERSION"
    NEXT_PATCH_VERSION = "NEXT_PATCH_VERSION"
    COMMIT_DISTANCE = "COMMIT_DISTANCE"
    DIRTY = "DIRTY"
    DIRTY_TEXT = "DIRTY_TEXT"
    DETACHED_HEAD = "DETACHED_HEAD"
    BRANCH_NAME = "BRANCH_NAME"
    QUALIFIED_BRANCH_NAME = "QUALIFIED_BRANCH_NAME"
    HEAD_TAGS = "HEAD_TAGS"
    HEAD_ANNOTATED_TAGS = "HEAD_ANNOTATED_TAGS"
    HEAD_LIGHTWEIGHT_TAGS = "HEAD_LIGHTWEIGHT_TAGS"
    GIT_SHA1_FULL = "GIT_SHA1_FULL"
    GIT_SHA1_ABBREVIATED = "GIT_SHA1_ABBREVIATED"
    GIT_SHA1_8 = "GIT_SHA1_8"
    COMMIT_TIMESTAMP = "COMMIT_TIMESTAMP"
    HEAD_COMMITTER_NAME = "HEAD_COMMITTER_NAME"
    HEAD_COMMITTER_EMAIL = "HEAD_COMMITTER_EMAIL"
    HEAD_COMMIT_DATETIME = "HEAD_COMMIT_DATETIME"

    @classmethod
    def parse(cls, name: str) -> MetadataKey | None:
        try:
            return cls(name.strip().upper())
        except ValueError:
            return None


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True, slots=True)
class CalculationFacts:
    """Raw facts gathered before any strategy runs."""

    head: str
    traversal: TraversalResult
    dirty: bool
    branch_name: str | None
    branch_qualifier: str

    @property
    def base_version(self) -> SemanticVersion:
        tag = self.traversal.base_tag
        return tag.semantic_version if tag else SemanticVersion.zero()

    @property
    def on_clean_tag(self) -> bool:
        """HEAD carries the base tag and nothing is modified."""
        return self.traversal.is_on_head and not self.dirty


class MetadataProvider:
    """Read-mostly metadata; every entry is computed on first access.

    Keys that do not apply (no base tag, detached HEAD, version not yet
    computed...) resolve to None.
    """

    def __init__(
        self,
        facts: CalculationFacts,
        repository: RepositoryFacade,
        config: VersionConfig,
    ) -> None:
        self._facts = facts
        self._repository = repository
        self._config = config
        self._cache: dict[MetadataKey, str | None] = {}
        self._resolvers: Mapping[MetadataKey, Callable[[], str | None]] = self._build_resolvers()

    @property
    def facts(self) -> CalculationFacts:
        return self._facts

    def get(self, key: MetadataKey) -> str | None:
        if key not in self._cache:
            resolver = self._resolvers.get(key)
            self._cache[key] = resolver() if resolver else None
        return self._cache[key]

    def record(self, key: MetadataKey, value: str) -> None:
        """Store a value produced by the calculation itself (e.g. the version)."""
        self._cache[key] = value

    def items(self) -> Iterator[tuple[MetadataKey, str]]:
        """All applicable entries, in enumeration order."""
        for key in MetadataKey:
            value = self.get(key)
            if value is not None:
                yield key, value

    def _head_tag_names(self, annotated: bool | None = None) -> str:
        refs = self._repository.tags_at(self._facts.head)
        return ",".join(r.name for r in refs if annotated is None or r.annotated == annotated)

    def _build_resolvers(self) -> dict[MetadataKey, Callable[[], str | None]]:
        facts = self._facts
        base = facts.base_version
        tag = facts.traversal.base_tag
        head = facts.head
        repo = self._repository
        return {
            MetadataKey.BASE_VERSION: lambda: str(base),
            MetadataKey.BASE_TAG: lambda: tag.raw_name if tag else None,
            MetadataKey.BASE_TAG_TYPE: lambda: (
                ("annotated" if tag.annotated else "lightweight") if tag else None
            ),
            MetadataKey.BASE_COMMIT_ON_HEAD: lambda: _flag(facts.traversal.is_on_head),
            MetadataKey.CURRENT_VERSION_MAJOR: lambda: str(base.major),
            MetadataKey.CURRENT_VERSION_MINOR: lambda: str(base.minor),
            MetadataKey.CURRENT_VERSION_PATCH: lambda: str(base.patch),
            MetadataKey.NEXT_MAJOR_VERSION: lambda: str(base.next_major()),
            MetadataKey.NEXT_MINOR_VERSION: lambda: str(base.next_minor()),
            MetadataKey.NEXT_PATCH_VERSION: lambda: str(base.next_patch()),
            MetadataKey.COMMIT_DISTANCE: lambda: str(facts.traversal.distance),
            MetadataKey.DIRTY: lambda: _flag(facts.dirty),
            MetadataKey.DIRTY_TEXT: lambda: DIRTY_QUALIFIER if facts.dirty else None,
            MetadataKey.DETACHED_HEAD: lambda: _flag(facts.branch_name is None),
            MetadataKey.BRANCH_NAME: lambda: facts.branch_name,
            MetadataKey.QUALIFIED_BRANCH_NAME: lambda: facts.branch_qualifier or None,
            MetadataKey.HEAD_TAGS: self._head_tag_names,
            MetadataKey.HEAD_ANNOTATED_TAGS: lambda: self._head_tag_names(annotated=True),
            MetadataKey.HEAD_LIGHTWEIGHT_TAGS: lambda: self._head_tag_names(annotated=False),
            MetadataKey.GIT_SHA1_FULL: lambda: head,
            MetadataKey.GIT_SHA1_ABBREVIATED: lambda: repo.abbreviated_id(
                head, self._config.git_commit_id_length
            ),
            MetadataKey.GIT_SHA1_8: lambda: repo.abbreviated_id(head, 8),
            MetadataKey.COMMIT_TIMESTAMP: lambda: repo.timestamp(head).strftime(
                COMMIT_TIMESTAMP_FORMAT
            ),
            MetadataKey.HEAD_COMMITTER_NAME: lambda: repo.committer(head).name,
            MetadataKey.HEAD_COMMITTER_EMAIL: lambda: repo.committer(head).email,
            MetadataKey.HEAD_COMMIT_DATETIME: lambda: repo.timestamp(head).isoformat(),
        }


class MetadataView:
    """Read-only capability handed to version scripts.

    Exposes exactly the MetadataKey names, as attributes or subscripts.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: MetadataProvider) -> None:
        object.__setattr__(self, "_provider", provider)

    def lookup(self, name: str) -> str | None:
        try:
            key = MetadataKey(name)
        except ValueError:
            raise KeyError(f"Unknown metadata key: {name}") from None
        return self._provider.get(key)

    def __getattr__(self, name: str) -> str | None:
        try:
            return self.lookup(name)
        except KeyError as e:
            raise AttributeError(str(e)) from None

    def __getitem__(self, name: str) -> str | None:
        return self.lookup(name)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("metadata is read-only")

    def __repr__(self) -> str:
        return "<metadata>"
