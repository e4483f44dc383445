"""Root conftest.py for test configuration and shared fixtures.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local gitver package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from gitver.core.errors import RepositoryAccessError  # noqa: E402
from gitver.git.models import Signature, TagRef  # noqa: E402

_EPOCH = 1_700_000_000


# --- In-memory facade ---


class FakeRepository:
    """In-memory RepositoryFacade; commit ids are the commit names.

    Each added commit becomes HEAD and is one minute younger than the
    previous one.
    """

    def __init__(self) -> None:
        self.graph: dict[str, list[str]] = {}
        self.tags: dict[str, list[TagRef]] = {}
        self.times: dict[str, int] = {}
        self.head: str | None = None
        self.dirty = False
        self.branch: str | None = "main"
        self.closed = False
        self.parent_calls = 0

    def add(
        self,
        name: str,
        *parents: str,
        tags: tuple[str, ...] = (),
        annotated: bool = False,
    ) -> str:
        self.graph[name] = list(parents)
        self.times[name] = _EPOCH + 60 * len(self.graph)
        for tag in tags:
            self.tag(tag, name, annotated=annotated)
        self.head = name
        return name

    def tag(self, name: str, commit: str, *, annotated: bool = False) -> None:
        self.tags.setdefault(commit, []).append(TagRef(name, commit, annotated))

    def linear(self, *names: str) -> str:
        """Chain commits, each the parent of the next."""
        previous: tuple[str, ...] = ()
        for name in names:
            self.add(name, *previous)
            previous = (name,)
        return names[-1]

    # RepositoryFacade

    def head_commit(self) -> str:
        if self.head is None:
            raise RepositoryAccessError.unborn_head()
        return self.head

    def parents(self, commit: str) -> list[str]:
        self.parent_calls += 1
        return list(self.graph[commit])

    def tags_at(self, commit: str) -> list[TagRef]:
        return sorted(self.tags.get(commit, ()), key=lambda ref: ref.name)

    def is_dirty(self) -> bool:
        return self.dirty

    def abbreviated_id(self, commit: str, length: int) -> str:
        return commit[:length]

    def timestamp(self, commit: str) -> datetime:
        return datetime.fromtimestamp(self.times[commit], tz=UTC)

    def committer(self, commit: str) -> Signature:
        return Signature("Test User", "test@example.com", self.timestamp(commit))

    def branch_name(self) -> str | None:
        return self.branch

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Empty in-memory repository (unborn HEAD on main)."""
    return FakeRepository()


# --- Real repositories ---


class RepoBuilder:
    """Builds a real repository commit by commit with pygit2.

    Every commit rewrites content.txt, so committing on HEAD always leaves a
    clean worktree. Committing on another ref leaves the worktree dirty until
    the next commit on HEAD.
    """

    def __init__(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.repo = pygit2.init_repository(str(path), initial_head="main")
        self.repo.config["user.name"] = "Test User"
        self.repo.config["user.email"] = "test@example.com"
        self.commits: dict[str, str] = {}
        self._clock = _EPOCH

    def signature(self) -> pygit2.Signature:
        self._clock += 60
        return pygit2.Signature("Test User", "test@example.com", self._clock, 0)

    def commit(self, name: str, *parents: str, ref: str = "HEAD") -> str:
        (self.path / "content.txt").write_text(f"{name}\n")
        self.repo.index.add("content.txt")
        self.repo.index.write()
        tree = self.repo.index.write_tree()
        if parents:
            parent_ids = [self.repo.get(self.commits[p]).id for p in parents]
        elif self.repo.head_is_unborn:
            parent_ids = []
        else:
            parent_ids = [self.repo.head.target]
        sig = self.signature()
        oid = self.repo.create_commit(ref, sig, sig, name, tree, parent_ids)
        self.commits[name] = str(oid)
        return str(oid)

    def linear(self, *names: str) -> None:
        for name in names:
            self.commit(name)

    def tag(self, name: str, at: str, *, annotated: bool = False) -> None:
        target = self.repo.get(self.commits[at]).id
        if annotated:
            self.repo.create_tag(
                name, target, pygit2.enums.ObjectType.COMMIT, self.signature(), f"Release {name}"
            )
        else:
            self.repo.references.create(f"refs/tags/{name}", target)

    def branch(self, name: str, at: str) -> None:
        self.repo.branches.local.create(name, self.repo.get(self.commits[at]))

    def checkout(self, branch: str) -> None:
        self.repo.checkout(
            self.repo.branches.local[branch], strategy=pygit2.enums.CheckoutStrategy.FORCE
        )

    def detach(self, at: str) -> None:
        commit = self.repo.get(self.commits[at])
        self.repo.checkout_tree(commit, strategy=pygit2.enums.CheckoutStrategy.FORCE)
        self.repo.set_head(commit.id)

    def modify_tracked(self) -> None:
        (self.path / "content.txt").write_text("local change\n")

    def add_untracked(self) -> None:
        (self.path / "scratch.txt").write_text("not tracked\n")


@pytest.fixture
def repo_builder(tmp_path: Path) -> Generator[RepoBuilder, None, None]:
    """Fresh repository with no commits."""
    builder = RepoBuilder(tmp_path / "repo")
    yield builder
    builder.repo.free()


@pytest.fixture
def linear_repo(repo_builder: RepoBuilder) -> RepoBuilder:
    """A -> B(1.0.0) -> C -> D(2.0.0, annotated) -> E, HEAD on main at E."""
    repo_builder.linear("A", "B", "C", "D", "E")
    repo_builder.tag("1.0.0", "B")
    repo_builder.tag("2.0.0", "D", annotated=True)
    return repo_builder
