"""pygit2-backed implementation of RepositoryFacade."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path

import structlog

from gitver.git._internal import RepoAccess, git_operation
from gitver.git.models import Signature, TagRef

log = structlog.get_logger(__name__)


class GitRepository:
    """Read-only repository facade over pygit2 with cleaner error handling."""

    def __init__(self, repo_path: Path | str) -> None:
        self._access = RepoAccess(repo_path)
        self._tags_by_commit: dict[str, list[TagRef]] | None = None
        log.debug("repository.opened", path=str(self._access.path))

    @property
    def path(self) -> Path:
        """Repository root path."""
        return self._access.path

    def head_commit(self) -> str:
        return str(self._access.must_head_commit().id)

    def parents(self, commit: str) -> list[str]:
        return [str(oid) for oid in self._access.must_commit(commit).parent_ids]

    def tags_at(self, commit: str) -> list[TagRef]:
        return list(self._tag_index().get(commit, ()))

    def is_dirty(self) -> bool:
        with git_operation("read status"):
            return self._access.is_dirty()

    def abbreviated_id(self, commit: str, length: int) -> str:
        return str(self._access.must_commit(commit).id)[:length]

    def timestamp(self, commit: str) -> datetime:
        return datetime.fromtimestamp(self._access.must_commit(commit).commit_time, tz=UTC)

    def committer(self, commit: str) -> Signature:
        return Signature.from_pygit2(self._access.must_commit(commit).committer)

    def branch_name(self) -> str | None:
        with git_operation("read HEAD"):
            return self._access.current_branch_name()

    def close(self) -> None:
        self._access.free()
        log.debug("repository.closed", path=str(self._access.path))

    def _tag_index(self) -> dict[str, list[TagRef]]:
        if self._tags_by_commit is None:
            index: dict[str, list[TagRef]] = defaultdict(list)
            with git_operation("list tags"):
                for name, commit, annotated in self._access.iter_tags():
                    index[commit].append(TagRef(name=name, commit=commit, annotated=annotated))
            for refs in index.values():
                refs.sort(key=lambda ref: ref.name)
            self._tags_by_commit = dict(index)
            log.debug("repository.tags_indexed", commits=len(index))
        return self._tags_by_commit
