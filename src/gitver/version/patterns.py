"""Version templates with ${...} placeholders.

Recognized placeholders:

    ${v}               working version, M.m.p
    ${M} ${m} ${p}     working version components
    ${M+} ${m+} ${p+}  base version components, incremented
    ${meta.KEY}        metadata value (empty when not applicable)
    ${env.NAME}        environment variable (empty when unset)

A leading '<' inside the braces, as in ${<meta.BRANCH_NAME}, prefixes the
value with '-' when the value is non-empty.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from gitver.core.errors import ConfigError
from gitver.version.metadata import MetadataKey, MetadataProvider
from gitver.version.semver import SemanticVersion

_PLACEHOLDER = re.compile(r"\$\{(<?)([^}]*)\}")


class VersionTemplate:
    """A template string, resolved lazily against one calculation."""

    def __init__(self, template: str) -> None:
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    def render(
        self,
        working: SemanticVersion,
        metadata: MetadataProvider,
        environ: Mapping[str, str] | None = None,
    ) -> str:
        env = os.environ if environ is None else environ
        base = metadata.facts.base_version

        def substitute(m: re.Match[str]) -> str:
            dash, name = m.group(1), m.group(2).strip()
            value = self._resolve(name, working, base, metadata, env)
            if dash and value:
                return f"-{value}"
            return value

        return _PLACEHOLDER.sub(substitute, self._template)

    def _resolve(
        self,
        name: str,
        working: SemanticVersion,
        base: SemanticVersion,
        metadata: MetadataProvider,
        env: Mapping[str, str],
    ) -> str:
        simple = {
            "v": str(working),
            "M": str(working.major),
            "m": str(working.minor),
            "p": str(working.patch),
            "M+": str(base.major + 1),
            "m+": str(base.minor + 1),
            "p+": str(base.patch + 1),
        }
        if name in simple:
            return simple[name]

        scope, _, key = name.partition(".")
        if scope == "meta" and key:
            meta_key = MetadataKey.parse(key)
            if meta_key is None:
                raise ConfigError.unknown_placeholder(name, self._template)
            return metadata.get(meta_key) or ""
        if scope == "env" and key:
            return env.get(key, "")
        raise ConfigError.unknown_placeholder(name, self._template)
