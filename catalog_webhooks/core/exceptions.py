"""
Custom Exception Hierarchy

Every error a handler can return maps to one exception here. The body sent to
the caller is always ``{"status": ..., "message": ...}``; details stay in the
server log.
"""
from typing import Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes written to the log alongside each rejected request"""

    INTERNAL_ERROR = "ERR_1000"
    VALIDATION_ERROR = "ERR_1001"
    NOT_FOUND = "ERR_1002"
    UNAUTHORIZED = "ERR_1004"
    RATE_LIMITED = "ERR_1006"
    PAYLOAD_TOO_LARGE = "ERR_1007"

    STORAGE_ERROR = "ERR_2001"


class AppException(Exception):
    """Base exception for all application errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        status: str = "error",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.status = status
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Response body: details are never included"""
        return {"status": self.status, "message": self.message}


class ValidationException(AppException):
    """Raised when a required path/query parameter or the body is unusable"""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )
        if field:
            self.details["field"] = field


class UnauthorizedException(AppException):
    """Raised when the webhook token is missing or does not match"""

    def __init__(self, message: str = "Invalid or missing token"):
        super().__init__(
            message=message,
            error_code=ErrorCode.UNAUTHORIZED,
            status_code=401,
            status="unauthorized"
        )


class NotFoundException(AppException):
    """Raised when a record is unknown or belongs to another entity.

    Both cases carry the same message so callers cannot probe for records of
    other entities.
    """

    def __init__(self, resource: str = "Record", identifier: Any = None):
        super().__init__(
            message=f"{resource} not found",
            error_code=ErrorCode.NOT_FOUND,
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)}
        )


class PayloadTooLargeException(AppException):
    """Raised when a webhook body exceeds MAX_PAYLOAD_BYTES"""

    def __init__(self, size: int, limit: int):
        super().__init__(
            message="Payload too large",
            error_code=ErrorCode.PAYLOAD_TOO_LARGE,
            status_code=413,
            details={"size_bytes": size, "limit_bytes": limit}
        )


class StorageException(AppException):
    """Raised when the persistence layer fails; the cause is only logged"""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORAGE_ERROR,
            status_code=500,
            details={"operation": operation} if operation else None
        )
