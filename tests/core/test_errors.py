"""Tests for error types and codes."""

import pytest

from gitver.core.errors import (
    ConfigError,
    DirtyRepositoryError,
    ErrorCode,
    GitverError,
    RepositoryAccessError,
    VersionCalculationError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_UNKNOWN_PLACEHOLDER, 2000),
            (ErrorCode.REPOSITORY_NOT_FOUND, 3000),
            (ErrorCode.REPOSITORY_DIRTY, 3000),
            (ErrorCode.CALCULATION_SCRIPT_FAILED, 4000),
            (ErrorCode.CALCULATION_NOT_COMPUTED, 4000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestGitverError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = GitverError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form is '[code] NAME: message'."""
        # Given
        error = GitverError(code=ErrorCode.REPOSITORY_READ_FAILED, message="boom")

        # When
        text = str(error)

        # Then
        assert text == "[3002] REPOSITORY_READ_FAILED: boom"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are regular exceptions and keep an explicit cause."""
        # Given
        cause = ValueError("inner")

        # When
        with pytest.raises(GitverError) as exc_info:
            raise VersionCalculationError.script_failed("inner") from cause

        # Then
        assert exc_info.value.__cause__ is cause


class TestConfigError:
    """ConfigError factory tests."""

    def test_given_yaml_failure_when_parse_error_then_records_path(self) -> None:
        """parse_error records the file and the reason."""
        # Given
        path = "/repo/.gitver/config.yaml"

        # When
        error = ConfigError.parse_error(path, "bad indent")

        # Then
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": path, "reason": "bad indent"}

    def test_given_bad_value_when_invalid_value_then_stringifies_value(self) -> None:
        """invalid_value keeps the offending value as text."""
        # Given
        value = 42

        # When
        error = ConfigError.invalid_value("version.strategy", value, "unknown")

        # Then
        assert error.details["value"] == "42"
        assert "version.strategy" in error.message

    def test_given_placeholder_when_unknown_placeholder_then_shows_braces(self) -> None:
        """unknown_placeholder renders the placeholder as written in templates."""
        # When
        error = ConfigError.unknown_placeholder("x", "${v}-${x}")

        # Then
        assert "${x}" in error.message
        assert error.details["template"] == "${v}-${x}"


class TestRepositoryErrors:
    """Repository and dirty error factory tests."""

    def test_given_path_when_not_a_repository_then_code_3001(self) -> None:
        error = RepositoryAccessError.not_a_repository("/tmp/nowhere")
        assert error.code == ErrorCode.REPOSITORY_NOT_FOUND
        assert error.details["path"] == "/tmp/nowhere"

    def test_given_head_when_dirty_then_message_uses_short_sha(self) -> None:
        head = "0123456789abcdef0123456789abcdef01234567"
        error = DirtyRepositoryError.for_head(head)
        assert "01234567" in error.message
        assert error.details["head"] == head

    def test_dirty_error_is_not_repository_access_error(self) -> None:
        """Dirty state and read failures are distinguishable."""
        error = DirtyRepositoryError.for_head("abc")
        assert not isinstance(error, RepositoryAccessError)
