from fastapi import HTTPException
from partflow.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | list | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class NotFoundError(AppException):
    """An entity id did not resolve."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
        details: dict | None = None,
    ):
        super().__init__(404, message, error_code, details)


class ConflictError(AppException):
    """Uniqueness violation detected before writing (e.g. duplicate location code).

    Reported as 400, which is what the clients already handle for it.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: dict | None = None,
    ):
        super().__init__(400, message, error_code, details)


class ValidationFailure(AppException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict | list | None = None,
    ):
        super().__init__(400, message, error_code, details)


class ConcurrentUpdateError(AppException):
    def __init__(
        self,
        message: str = "Concurrent inventory update detected",
        details: dict | None = None,
    ):
        super().__init__(409, message, ErrorCode.CONCURRENT_UPDATE, details)
