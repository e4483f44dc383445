"""Branch name to version qualifier policies."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gitver.config.constants import QUALIFIER_MAX_LENGTH, UNEXPECTED_CHARS_PATTERN
from gitver.config.models import BranchingPolicyConfig, TransformConfig, TransformKind
from gitver.core.errors import ConfigError

_UNEXPECTED_CHARS = re.compile(UNEXPECTED_CHARS_PATTERN)


@dataclass(frozen=True, slots=True)
class TextTransform:
    """A named, parameterized text operation."""

    kind: TransformKind
    pattern: re.Pattern[str] | None = None
    replacement: str = ""
    prefix: str = ""
    length: int = QUALIFIER_MAX_LENGTH

    @classmethod
    def from_config(cls, config: TransformConfig) -> TextTransform:
        return cls(
            kind=config.kind,
            pattern=re.compile(config.pattern) if config.pattern is not None else None,
            replacement=config.replacement,
            prefix=config.prefix or "",
            length=config.length or QUALIFIER_MAX_LENGTH,
        )

    def apply(self, text: str) -> str:
        return _TRANSFORMS[self.kind](self, text)


def _replace_regex(t: TextTransform, text: str) -> str:
    if t.pattern is None:
        raise ConfigError.invalid_value(
            "transformations", t.kind, "replace_regex requires 'pattern'"
        )
    return t.pattern.sub(t.replacement, text)


def _strip_prefix(t: TextTransform, text: str) -> str:
    return text.removeprefix(t.prefix)


_TRANSFORMS: dict[TransformKind, Callable[[TextTransform, str], str]] = {
    "replace_regex": _replace_regex,
    "strip_prefix": _strip_prefix,
    "truncate": lambda t, text: text[: t.length],
    "remove_unexpected_chars": lambda _t, text: _UNEXPECTED_CHARS.sub("", text),
    "replace_unexpected_chars": lambda _t, text: _UNEXPECTED_CHARS.sub("_", text),
    "lowercase": lambda _t, text: text.lower(),
    "uppercase": lambda _t, text: text.upper(),
    "ignore": lambda _t, _text: "",
}


@dataclass(frozen=True, slots=True)
class BranchingPolicy:
    """Full-match branch pattern plus ordered transformations."""

    pattern: re.Pattern[str]
    transformations: tuple[TextTransform, ...]

    @classmethod
    def from_config(cls, config: BranchingPolicyConfig) -> BranchingPolicy:
        return cls(
            pattern=re.compile(config.pattern),
            transformations=tuple(TextTransform.from_config(t) for t in config.transformations),
        )

    def apply(self, branch_name: str) -> str | None:
        """Qualifier for `branch_name`, or None when the pattern does not match."""
        m = self.pattern.fullmatch(branch_name)
        if m is None:
            return None
        text = (m.group(1) or "") if self.pattern.groups else branch_name
        for transform in self.transformations:
            text = transform.apply(text)
        return text


def default_qualifier(branch_name: str) -> str:
    """Drop characters unsafe in versions and bound the length."""
    return _UNEXPECTED_CHARS.sub("", branch_name)[:QUALIFIER_MAX_LENGTH]


def qualify(
    branch_name: str | None,
    policies: Sequence[BranchingPolicy],
    *,
    use_default_policy: bool = True,
    non_qualifier_branches: Sequence[str] = (),
) -> str:
    """Qualifier contributed by the current branch ("" for none).

    Explicit policies are tried in order and the first match wins, even when
    it yields an empty qualifier. The default policy and `non_qualifier_branches`
    only apply when no explicit policy is configured.
    """
    if not branch_name:
        return ""
    if policies:
        for policy in policies:
            qualifier = policy.apply(branch_name)
            if qualifier is not None:
                return qualifier
        return ""
    if use_default_policy and branch_name not in non_qualifier_branches:
        return default_qualifier(branch_name)
    return ""
