"""String parsing helpers for git ref names."""

from __future__ import annotations

_REFS_HEADS_PREFIX = "refs/heads/"
_REFS_TAGS_PREFIX = "refs/tags/"


def extract_tag_name(refname: str) -> str | None:
    """Extract tag name from full ref (e.g., 'refs/tags/v1.0' -> 'v1.0')."""
    if refname.startswith(_REFS_TAGS_PREFIX):
        return refname[len(_REFS_TAGS_PREFIX) :]
    return None


def extract_branch_name(refname: str) -> str | None:
    """Extract branch name from full ref (e.g., 'refs/heads/main' -> 'main')."""
    if refname.startswith(_REFS_HEADS_PREFIX):
        return refname[len(_REFS_HEADS_PREFIX) :]
    return None
