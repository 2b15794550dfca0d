"""Tests for error types and codes."""

import pytest

from covmerge.core.errors import (
    ConfigError,
    CovmergeError,
    ErrorCode,
    FragmentError,
    RemapError,
    ReportError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.FRAGMENT_WRITE_FAILED, 3000),
            (ErrorCode.FRAGMENT_EXISTS, 3000),
            (ErrorCode.REMAP_READ_FAILED, 4000),
            (ErrorCode.REMAP_WRITE_FAILED, 4000),
            (ErrorCode.REMAP_INVALID_RULES, 4000),
            (ErrorCode.REPORT_WRITE_FAILED, 5000),
            (ErrorCode.REPORT_UNKNOWN_FORMAT, 5000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestCovmergeError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = CovmergeError(
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

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        error = CovmergeError(code=ErrorCode.REPORT_WRITE_FAILED, message="disk full")

        assert str(error) == "[5001] REPORT_WRITE_FAILED: disk full"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are ordinary exceptions."""
        with pytest.raises(CovmergeError):
            raise FragmentError.already_exists("/tmp/x.json")

    def test_given_error_when_mutated_then_rejected(self) -> None:
        """Errors are immutable."""
        error = CovmergeError(code=ErrorCode.REMAP_READ_FAILED, message="m")

        with pytest.raises(AttributeError):
            error.message = "other"  # type: ignore[misc]


class TestConstructors:
    """Classmethod constructors carry code and details."""

    def test_config_parse_error(self) -> None:
        error = ConfigError.parse_error("/repo/.covmerge.yaml", "bad indent")

        assert error.code is ErrorCode.CONFIG_PARSE_ERROR
        assert "/repo/.covmerge.yaml" in error.message
        assert error.details == {"path": "/repo/.covmerge.yaml", "reason": "bad indent"}

    def test_config_invalid_value_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("merge.format", 42, "not allowed")

        assert error.code is ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["value"] == "42"

    def test_fragment_write_failed(self) -> None:
        error = FragmentError.write_failed("/parts/a.json", "read-only")

        assert error.code is ErrorCode.FRAGMENT_WRITE_FAILED
        assert isinstance(error, CovmergeError)

    def test_remap_invalid_rules(self) -> None:
        error = RemapError.invalid_rules("overlap")

        assert error.code is ErrorCode.REMAP_INVALID_RULES
        assert error.details == {"reason": "overlap"}

    def test_report_unknown_format(self) -> None:
        error = ReportError.unknown_format("lcov")

        assert error.code is ErrorCode.REPORT_UNKNOWN_FORMAT
        assert "'lcov'" in error.message
