"""
Custom exceptions for EVC Track.

This module provides a hierarchy of exceptions for better error handling
and more informative error messages throughout the application.
"""

from utils.error_codes import ErrorCode


class EVCTrackError(Exception):
    """Base exception for all EVC Track errors."""

    status_code = 500
    error_code = ErrorCode.E500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def to_dict(self) -> dict:
        body = {'error': self.message, 'code': self.error_code.value}
        if self.details:
            body['details'] = self.details
        return body


class ValidationError(EVCTrackError):
    """Input rejected before any persistence call."""

    status_code = 400
    error_code = ErrorCode.E003_INVALID_DATA_TYPE

    def __init__(
        self,
        message: str,
        field: str = None,
        value=None,
        expected_range: tuple = None,
        error_code: ErrorCode = None,
    ):
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = value
        if expected_range:
            details['expected_range'] = list(expected_range)
        super().__init__(message, details)
        self.field = field
        self.value = value
        self.expected_range = expected_range
        if error_code is not None:
            self.error_code = error_code


class AuthenticationError(EVCTrackError):
    """Identity asserted by the request could not be trusted."""

    status_code = 401
    error_code = ErrorCode.E100_INVALID_PROXY_TOKEN


class RecordNotFoundError(EVCTrackError):
    """Requested record does not exist for the current owner."""

    status_code = 404
    error_code = ErrorCode.E400_RECORD_NOT_FOUND

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} not found", {'id': record_id})
        self.entity = entity
        self.record_id = record_id


class StoreError(EVCTrackError):
    """Remote store operation failed. The message is the driver's, verbatim."""

    status_code = 503
    error_code = ErrorCode.E200_STORE_OPERATION_FAILED

    def __init__(self, message: str, operation: str = None):
        details = {}
        if operation:
            details['operation'] = operation
        super().__init__(message, details)
        self.operation = operation


class LocalStorageError(EVCTrackError):
    """Local storage file could not be read or written."""

    error_code = ErrorCode.E201_LOCAL_STORAGE_FAILED

    def __init__(self, message: str, key: str = None, path: str = None):
        details = {}
        if key:
            details['key'] = key
        if path:
            details['path'] = path
        super().__init__(message, details)
        self.key = key
        self.path = path


class ConfigurationError(EVCTrackError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str = None):
        details = {}
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, details)
        self.config_key = config_key
