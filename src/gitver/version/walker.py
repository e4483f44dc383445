"""Breadth-first search from HEAD to the nearest version tag."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from gitver.config.models import LookupPolicyName
from gitver.git.facade import RepositoryFacade
from gitver.version.tags import TagMatcher, VersionTag

log = structlog.get_logger(__name__)

_SortKey = tuple[object, ...]


@dataclass(frozen=True, slots=True)
class TraversalResult:
    """Nearest version tag and the number of parent edges from HEAD to it.

    Without a tag, distance is the depth at which the search stopped.
    """

    base_tag: VersionTag | None
    distance: int
    is_on_head: bool


def _by_version(tag: VersionTag) -> _SortKey:
    v = tag.semantic_version
    return (-v.major, -v.minor, -v.patch, tag.raw_name)


class CommitGraphWalker:
    """Walks parent edges layer by layer, never visiting a commit twice.

    The first layer holding at least one version tag ends the search. The
    lookup policy picks among the tags of that layer:

    - max: greatest version, then smallest raw name
    - latest: most recent commit timestamp, then as max
    - annotated: annotated tags before lightweight ones, then as max
    """

    def __init__(
        self,
        repository: RepositoryFacade,
        matcher: TagMatcher,
        *,
        lookup_policy: LookupPolicyName = "max",
        max_depth: int | None = None,
    ) -> None:
        self._repository = repository
        self._matcher = matcher
        self._max_depth = max_depth
        self._sort_key = self._policy_key(lookup_policy)

    def walk(self, head: str) -> TraversalResult:
        frontier = [head]
        visited = {head}
        depth = 0
        while True:
            found = [
                tag
                for commit in frontier
                for tag in self._matcher.version_tags(self._repository.tags_at(commit))
            ]
            if found:
                chosen = self.choose(found)
                log.debug(
                    "walker.tag_found",
                    tag=chosen.raw_name,
                    distance=depth,
                    candidates=len(found),
                    visited=len(visited),
                )
                return TraversalResult(base_tag=chosen, distance=depth, is_on_head=depth == 0)

            if self._max_depth is not None and depth >= self._max_depth:
                log.debug("walker.depth_exhausted", max_depth=self._max_depth)
                break

            next_frontier = []
            for commit in frontier:
                for parent in self._repository.parents(commit):
                    if parent not in visited:
                        visited.add(parent)
                        next_frontier.append(parent)
            if not next_frontier:
                log.debug("walker.history_exhausted", depth=depth, visited=len(visited))
                break
            frontier = next_frontier
            depth += 1

        return TraversalResult(base_tag=None, distance=depth, is_on_head=False)

    def choose(self, tags: Sequence[VersionTag]) -> VersionTag:
        """Pick one tag among tags found at the same distance."""
        return min(tags, key=self._sort_key)

    def _policy_key(self, policy: LookupPolicyName) -> Callable[[VersionTag], _SortKey]:
        if policy == "latest":
            return lambda tag: (
                -self._repository.timestamp(tag.commit).timestamp(),
                *_by_version(tag),
            )
        if policy == "annotated":
            return lambda tag: (not tag.annotated, *_by_version(tag))
        return _by_version
