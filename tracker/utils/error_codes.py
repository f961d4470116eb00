"""
Error Code Taxonomy for EVC Track

Structured error codes for alerting and debugging.

Error Code Format:
- E001-E099: Validation errors (bad input data)
- E100-E199: Authentication errors (identity from the auth proxy)
- E200-E299: Storage errors (remote store, local storage file)
- E400-E499: Business logic errors (missing records, invalid state)
- E500-E599: System errors
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """High-level error categories for grouping and alerting."""

    VALIDATION = "validation"
    AUTH = "auth"
    STORAGE = "storage"
    BUSINESS_LOGIC = "business_logic"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Structured error codes with consistent format."""

    # Validation Errors (E001-E099)
    E001_NO_DATA = "E001"  # Empty request body
    E002_MISSING_REQUIRED_FIELD = "E002"  # Required field missing in request
    E003_INVALID_DATA_TYPE = "E003"  # Field has wrong data type
    E004_OUT_OF_RANGE = "E004"  # Value outside acceptable range (percent, amount)
    E005_INVALID_CHOICE = "E005"  # Value not in an enumeration
    E006_INVALID_TIMESTAMP = "E006"  # Unparseable date/time

    # Authentication Errors (E100-E199)
    E100_INVALID_PROXY_TOKEN = "E100"  # Identity header sent without a valid proxy token

    # Storage Errors (E200-E299)
    E200_STORE_OPERATION_FAILED = "E200"  # Remote store rejected the operation
    E201_LOCAL_STORAGE_FAILED = "E201"  # Local storage unreadable or unwritable

    # Business Logic Errors (E400-E499)
    E400_RECORD_NOT_FOUND = "E400"  # Record not found for owner
    E401_SESSION_NOT_ACTIVE = "E401"  # Completing a session that is not active
    E402_NO_EXPORT_DATA = "E402"  # Nothing to export
    E403_SESSION_ALREADY_ACTIVE = "E403"  # Starting a session while another is active

    # System Errors (E500-E599)
    E500_INTERNAL_SERVER_ERROR = "E500"  # Unhandled internal error


def _meta(category: ErrorCategory, description: str, severity: str = "warning", alert: bool = False) -> dict:
    return {"category": category, "description": description, "severity": severity, "alert": alert}


ERROR_METADATA = {
    ErrorCode.E001_NO_DATA: _meta(ErrorCategory.VALIDATION, "No data provided"),
    ErrorCode.E002_MISSING_REQUIRED_FIELD: _meta(ErrorCategory.VALIDATION, "Required field missing in request"),
    ErrorCode.E003_INVALID_DATA_TYPE: _meta(ErrorCategory.VALIDATION, "Field has wrong data type"),
    ErrorCode.E004_OUT_OF_RANGE: _meta(ErrorCategory.VALIDATION, "Value outside acceptable range"),
    ErrorCode.E005_INVALID_CHOICE: _meta(ErrorCategory.VALIDATION, "Value is not one of the allowed choices"),
    ErrorCode.E006_INVALID_TIMESTAMP: _meta(ErrorCategory.VALIDATION, "Invalid timestamp format"),
    ErrorCode.E100_INVALID_PROXY_TOKEN: _meta(
        ErrorCategory.AUTH, "Identity header without a valid proxy token", alert=True
    ),
    ErrorCode.E200_STORE_OPERATION_FAILED: _meta(
        ErrorCategory.STORAGE, "Remote store operation failed", "error", alert=True
    ),
    ErrorCode.E201_LOCAL_STORAGE_FAILED: _meta(
        ErrorCategory.STORAGE, "Local storage unreadable or unwritable", "error", alert=True
    ),
    ErrorCode.E400_RECORD_NOT_FOUND: _meta(ErrorCategory.BUSINESS_LOGIC, "Record not found for owner", "info"),
    ErrorCode.E401_SESSION_NOT_ACTIVE: _meta(ErrorCategory.BUSINESS_LOGIC, "Charging session is not active"),
    ErrorCode.E402_NO_EXPORT_DATA: _meta(ErrorCategory.BUSINESS_LOGIC, "No sessions to export", "info"),
    ErrorCode.E403_SESSION_ALREADY_ACTIVE: _meta(
        ErrorCategory.BUSINESS_LOGIC, "Another charging session is already active", "info"
    ),
    ErrorCode.E500_INTERNAL_SERVER_ERROR: _meta(
        ErrorCategory.SYSTEM, "Unhandled internal error", "critical", alert=True
    ),
}

UNKNOWN_ERROR = _meta(ErrorCategory.SYSTEM, "Unknown error", "error", alert=True)


def get_error_metadata(error_code: ErrorCode) -> dict:
    return ERROR_METADATA.get(error_code, UNKNOWN_ERROR)


class StructuredError:
    """Structured error with code, category, and metadata."""

    def __init__(self, code: ErrorCode, message: str, exception: Optional[Exception] = None, **context):
        """
        Create a structured error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            exception: Original exception (if applicable)
            **context: Additional context fields (record id, mode, etc.)
        """
        self.code = code
        self.message = message
        self.exception = exception
        self.context = context
        self.metadata = get_error_metadata(code)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        error_dict = {
            "code": self.code.value,
            "category": self.metadata["category"].value,
            "message": self.message,
            "severity": self.metadata["severity"],
            "alert": self.metadata["alert"],
        }

        if self.exception:
            error_dict["exception_type"] = type(self.exception).__name__
            error_dict["exception_message"] = str(self.exception)

        if self.context:
            error_dict["context"] = self.context

        return error_dict

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"
