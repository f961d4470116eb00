"""Tests for custom EVC Track exceptions."""

import pytest

from exceptions import (
    AuthenticationError,
    ConfigurationError,
    EVCTrackError,
    LocalStorageError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from utils.error_codes import ErrorCategory, ErrorCode, StructuredError, get_error_metadata


class TestEVCTrackError:
    """Tests for base EVCTrackError."""

    def test_basic_message(self):
        """Test exception with just a message."""
        error = EVCTrackError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details == {}

    def test_with_details(self):
        error = EVCTrackError("Error occurred", {"key": "value"})
        assert "Error occurred" in str(error)
        assert error.to_dict() == {"error": "Error occurred", "code": "E500", "details": {"key": "value"}}

    def test_is_exception(self):
        with pytest.raises(EVCTrackError):
            raise EVCTrackError("test")


class TestValidationError:
    def test_details(self):
        error = ValidationError("start_percent out of range", field="start_percent", value=120,
                                expected_range=(0, 100), error_code=ErrorCode.E004_OUT_OF_RANGE)

        assert error.status_code == 400
        assert error.to_dict() == {
            "error": "start_percent out of range",
            "code": "E004",
            "details": {"field": "start_percent", "value": 120, "expected_range": [0, 100]},
        }

    def test_default_code(self):
        assert ValidationError("bad").error_code == ErrorCode.E003_INVALID_DATA_TYPE

    def test_override_does_not_leak_to_class(self):
        ValidationError("x", error_code=ErrorCode.E005_INVALID_CHOICE)
        assert ValidationError.error_code == ErrorCode.E003_INVALID_DATA_TYPE


class TestStatusCodes:
    @pytest.mark.parametrize(
        "error,status,code",
        [
            (AuthenticationError("Invalid proxy token"), 401, "E100"),
            (RecordNotFoundError("Charging session", "abc"), 404, "E400"),
            (StoreError("connection refused", operation="select_sessions"), 503, "E200"),
            (LocalStorageError("unreadable", path="/tmp/x.json"), 500, "E201"),
            (ConfigurationError("missing", config_key="DATABASE_URL"), 500, "E500"),
        ],
    )
    def test_mapping(self, error, status, code):
        assert isinstance(error, EVCTrackError)
        assert error.status_code == status
        assert error.to_dict()["code"] == code

    def test_not_found_message(self):
        error = RecordNotFoundError("Expense", "abc")
        assert error.message == "Expense not found"
        assert error.details == {"id": "abc"}

    def test_store_error_keeps_driver_message(self):
        assert StoreError("duplicate key value violates unique constraint").message == (
            "duplicate key value violates unique constraint"
        )


class TestErrorCodes:
    def test_every_code_has_metadata(self):
        for code in ErrorCode:
            assert get_error_metadata(code)["description"]

    def test_structured_error(self):
        error = StructuredError(ErrorCode.E200_STORE_OPERATION_FAILED, "Store down", ValueError("boom"), mode="x")

        data = error.to_dict()
        assert str(error) == "[E200] Store down"
        assert data["category"] == ErrorCategory.STORAGE.value
        assert data["exception_type"] == "ValueError"
        assert data["context"] == {"mode": "x"}
