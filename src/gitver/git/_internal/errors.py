"""Centralized error mapping for pygit2 exceptions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import pygit2

from gitver.core.errors import RepositoryAccessError


class ErrorMapper:
    """Maps pygit2 exceptions to domain errors."""

    @staticmethod
    @contextmanager
    def guard(operation: str) -> Iterator[None]:
        """Context manager for consistent exception translation.

        pygit2 signals missing objects with KeyError and malformed ids with
        ValueError; both are read failures here.
        """
        try:
            yield
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RepositoryAccessError.read_failed(operation, str(e) or type(e).__name__) from e


def git_operation(operation: str) -> AbstractContextManager[None]:
    """Wrap a block of pygit2 reads with consistent exception translation."""
    return ErrorMapper.guard(operation)
