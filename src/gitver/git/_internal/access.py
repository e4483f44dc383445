"""Repository access layer - owns pygit2.Repository and exposes computed facts."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pygit2

from gitver.core.errors import RepositoryAccessError
from gitver.git._internal.constants import NOT_DIRTY_FLAGS
from gitver.git._internal.errors import git_operation
from gitver.git._internal.parsing import extract_branch_name, extract_tag_name


class RepoAccess:
    """Owns pygit2.Repository and provides normalized read access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        git_dir = pygit2.discover_repository(str(self._path))
        if git_dir is None:
            raise RepositoryAccessError.not_a_repository(str(self._path))
        try:
            self._repo = pygit2.Repository(git_dir)
        except pygit2.GitError as e:
            raise RepositoryAccessError.not_a_repository(str(self._path)) from e

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else self._path

    # =========================================================================
    # Repository State Facts
    # =========================================================================

    @property
    def is_unborn(self) -> bool:
        return self._repo.head_is_unborn

    @property
    def is_detached(self) -> bool:
        return self._repo.head_is_detached

    def current_branch_name(self) -> str | None:
        if self.is_unborn or self.is_detached:
            return None
        return extract_branch_name(self._repo.head.name)

    def is_dirty(self) -> bool:
        """True if tracked files differ from HEAD in the index or the worktree.

        Untracked and ignored files do not count, like `git describe --dirty`.
        """
        if self._repo.is_bare:
            return False
        return any(flags & ~NOT_DIRTY_FLAGS for flags in self._repo.status().values())

    # =========================================================================
    # Must Helpers (assert replacements with proper errors)
    # =========================================================================

    def must_head_commit(self) -> pygit2.Commit:
        if self.is_unborn:
            raise RepositoryAccessError.unborn_head()
        with git_operation("resolve HEAD"):
            return self._repo.head.peel(pygit2.Commit)

    def must_commit(self, sha: str) -> pygit2.Commit:
        with git_operation(f"read commit {sha[:8]}"):
            obj = self._repo[sha]
        if not isinstance(obj, pygit2.Commit):
            raise RepositoryAccessError.read_failed(f"read commit {sha[:8]}", "not a commit")
        return obj

    # =========================================================================
    # Tag Iteration
    # =========================================================================

    def iter_tags(self) -> Iterator[tuple[str, str, bool]]:
        """
        Iterate tags as (name, commit_sha, is_annotated).

        Contract:
        - name: normalized tag name (no 'refs/tags/' prefix)
        - commit_sha: the commit the tag designates; annotated tags
          (including tags of tags) are peeled
        - tags designating trees or blobs are skipped
        """
        for refname in self._repo.references:
            name = extract_tag_name(refname)
            if name is None:
                continue
            ref = self._repo.references[refname].resolve()
            obj = self._repo.get(ref.target)
            if obj is None:
                continue
            annotated = isinstance(obj, pygit2.Tag)
            try:
                commit = obj.peel(pygit2.Commit)
            except (pygit2.GitError, ValueError):
                # Tag of a tree or blob: not a version tag candidate
                continue
            yield name, str(commit.id), annotated

    def free(self) -> None:
        self._repo.free()
