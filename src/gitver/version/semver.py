"""Semantic version triple and qualified version models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_NUMBER = re.compile(r"\d+", re.ASCII)


def parse_component(text: str) -> int | None:
    """Parse a non-negative ASCII integer, or None if `text` is not one."""
    if _NUMBER.fullmatch(text) is None:
        return None
    return int(text)


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    """major.minor.patch, ordered lexicographically."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(
                f"Version components must be non-negative: {self.major}.{self.minor}.{self.patch}"
            )

    @classmethod
    def zero(cls) -> SemanticVersion:
        return cls(0, 0, 0)

    def next_major(self) -> SemanticVersion:
        return SemanticVersion(self.major + 1, 0, 0)

    def next_minor(self) -> SemanticVersion:
        return SemanticVersion(self.major, self.minor + 1, 0)

    def next_patch(self) -> SemanticVersion:
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version followed by ordered, non-empty qualifiers."""

    base: SemanticVersion
    qualifiers: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "qualifiers", tuple(q for q in self.qualifiers if q))

    def __str__(self) -> str:
        return "-".join((str(self.base), *self.qualifiers))
