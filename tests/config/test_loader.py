"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- config_error_from_validation()
- load_config() precedence: kwargs > env > repo yaml > global yaml > defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from gitver.config import loader
from gitver.config.loader import (
    _deep_merge,
    _load_yaml,
    config_error_from_validation,
    load_config,
)
from gitver.config.models import VersionConfig
from gitver.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config at a temp file and drop GITVER__ env vars."""
    global_path = tmp_path / "global" / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", global_path)
    for name in list(os.environ):
        if name.upper().startswith("GITVER__"):
            monkeypatch.delenv(name)
    return global_path


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = _write(tmp_path / "config.yaml", "version:\n  strategy: pattern\n")
        assert _load_yaml(yaml_file) == {"version": {"strategy": "pattern"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        assert _load_yaml(_write(tmp_path / "empty.yaml", "")) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = _write(tmp_path / "invalid.yaml", "version:\n  policies: [unclosed")
        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = _write(tmp_path / "list.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_merge(self) -> None:
        base = {"version": {"strategy": "pattern", "use_dirty": True}}
        override = {"version": {"strategy": "maven_like"}}
        assert _deep_merge(base, override) == {
            "version": {"strategy": "maven_like", "use_dirty": True}
        }

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}
        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestConfigErrorFromValidation:
    """Tests for pydantic error translation."""

    def test_field_path_is_prefixed(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            VersionConfig.model_validate({"strategy": "calver"})

        error = config_error_from_validation(exc_info.value, prefix="version")

        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["field"] == "version.strategy"
        assert error.details["value"] == "calver"

    def test_model_level_error_uses_root(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            VersionConfig.model_validate({"strategy": "script"})

        error = config_error_from_validation(exc_info.value)

        assert error.details["field"] == "<root>"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.version.model_dump() == VersionConfig().model_dump()
        assert config.logging.level == "WARNING"

    def test_repo_yaml_is_read(self, tmp_path: Path) -> None:
        _write(
            tmp_path / ".gitver" / "config.yaml",
            "version:\n"
            "  strategy: pattern\n"
            "  branching_policies:\n"
            "    - pattern: 'release/(.*)'\n"
            "      transformations: [uppercase]\n",
        )
        config = load_config(tmp_path)
        assert config.version.strategy == "pattern"
        assert config.version.branching_policies[0].transformations[0].kind == "uppercase"

    def test_repo_yaml_overrides_global(self, tmp_path: Path, isolated_environment: Path) -> None:
        _write(isolated_environment, "version:\n  use_dirty: true\n  use_snapshot: true\n")
        _write(tmp_path / ".gitver" / "config.yaml", "version:\n  use_snapshot: false\n")

        config = load_config(tmp_path)

        assert config.version.use_dirty is True
        assert config.version.use_snapshot is False

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write(tmp_path / ".gitver" / "config.yaml", "version:\n  max_search_depth: 10\n")
        monkeypatch.setenv("GITVER__VERSION__MAX_SEARCH_DEPTH", "50")

        config = load_config(tmp_path)

        assert config.version.max_search_depth == 50

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITVER__VERSION__STRATEGY", "pattern")

        config = load_config(tmp_path, version={"strategy": "maven_like", "use_dirty": True})

        assert config.version.strategy == "maven_like"
        assert config.version.use_dirty is True

    def test_explicit_config_file(self, tmp_path: Path) -> None:
        _write(tmp_path / ".gitver" / "config.yaml", "version:\n  use_dirty: true\n")
        explicit = _write(tmp_path / "other.yaml", "version:\n  use_snapshot: true\n")

        config = load_config(tmp_path, explicit)

        assert config.version.use_snapshot is True
        assert config.version.use_dirty is False

    def test_missing_explicit_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write(tmp_path / ".gitver" / "config.yaml", "version:\n  lookup_policy: oldest\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "lookup_policy" in exc_info.value.details["field"]
