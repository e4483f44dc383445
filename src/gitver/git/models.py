"""Serializable data models for repository reads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import pygit2


@dataclass(frozen=True, slots=True)
class Signature:
    """Git author/committer signature."""

    name: str
    email: str
    time: datetime

    @classmethod
    def from_pygit2(cls, sig: pygit2.Signature) -> Signature:
        return cls(sig.name, sig.email, datetime.fromtimestamp(sig.time, tz=UTC))


@dataclass(frozen=True, slots=True)
class TagRef:
    """A tag peeled to the commit it designates."""

    name: str
    commit: str
    annotated: bool
