"""The read-only repository queries the version engine depends on."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from gitver.git.models import Signature, TagRef


class RepositoryFacade(Protocol):
    """Read-only view of one repository.

    Commits are identified by their full hex sha. Every method may raise
    RepositoryAccessError; callers treat that as fatal. Implementations are
    not assumed to be safe to share between threads.
    """

    def head_commit(self) -> str: ...

    def parents(self, commit: str) -> Sequence[str]: ...

    def tags_at(self, commit: str) -> Sequence[TagRef]: ...

    def is_dirty(self) -> bool: ...

    def abbreviated_id(self, commit: str, length: int) -> str: ...

    def timestamp(self, commit: str) -> datetime: ...

    def committer(self, commit: str) -> Signature: ...

    def branch_name(self) -> str | None: ...

    def close(self) -> None: ...
