"""Tag matching: turn tag names into semantic versions."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from gitver.core.errors import ConfigError
from gitver.git.models import TagRef
from gitver.version.semver import SemanticVersion, parse_component

_GROUP_NAMES = ("major", "minor", "patch")


@dataclass(frozen=True, slots=True)
class TagMatch:
    """Result of matching one tag name."""

    version: SemanticVersion
    prefix: str
    suffix: str


@dataclass(frozen=True, slots=True)
class VersionTag:
    """A tag whose name parses as a semantic version."""

    semantic_version: SemanticVersion
    raw_name: str
    commit: str
    annotated: bool
    prefix: str = ""
    suffix: str = ""


class TagMatcher:
    """Matches tag names against a configured full-match pattern.

    The numeric groups are the named groups major/minor/patch when the pattern
    declares all three, otherwise groups 1, 2 and 3. Text before the major
    group is the prefix, text after the patch group is the suffix.
    """

    def __init__(self, pattern: str) -> None:
        self._pattern = re.compile(pattern)
        if set(_GROUP_NAMES).issubset(self._pattern.groupindex):
            self._groups: tuple[int | str, ...] = _GROUP_NAMES
        elif self._pattern.groups >= 3:
            self._groups = (1, 2, 3)
        else:
            raise ConfigError.invalid_value(
                "tag_pattern", pattern, "needs three capture groups for major, minor and patch"
            )

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def match(self, tag_name: str) -> SemanticVersion | None:
        """Semantic version of `tag_name`, or None when it is not a version tag."""
        found = self.match_tag(tag_name)
        return found.version if found else None

    def match_tag(self, tag_name: str) -> TagMatch | None:
        m = self._pattern.fullmatch(tag_name)
        if m is None:
            return None
        components = []
        for group in self._groups:
            text = m.group(group)
            value = parse_component(text) if text is not None else None
            if value is None:
                raise ConfigError.invalid_value(
                    "tag_pattern",
                    self.pattern,
                    f"group {group!r} matched {text!r} in tag {tag_name!r}, "
                    "expected a non-negative integer",
                )
            components.append(value)
        major, minor, patch = components
        return TagMatch(
            version=SemanticVersion(major, minor, patch),
            prefix=tag_name[: m.start(self._groups[0])],
            suffix=tag_name[m.end(self._groups[2]) :],
        )

    def version_tags(self, refs: Iterable[TagRef]) -> list[VersionTag]:
        """Keep the refs whose names are version tags."""
        tags = []
        for ref in refs:
            found = self.match_tag(ref.name)
            if found is None:
                continue
            tags.append(
                VersionTag(
                    semantic_version=found.version,
                    raw_name=ref.name,
                    commit=ref.commit,
                    annotated=ref.annotated,
                    prefix=found.prefix,
                    suffix=found.suffix,
                )
            )
        return tags
