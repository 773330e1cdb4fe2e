"""Application error taxonomy.

Every error raised on purpose by the service derives from ``AppError`` so
the API layer can render it as a consistent JSON body.
"""

from typing import Any


class AppError(Exception):
    """Base class for application errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InputValidationError(AppError):
    """Missing résumé or job description, or malformed analysis config."""

    status_code = 400
    error_code = "INVALID_INPUT"


class UnsupportedFormatError(InputValidationError):
    status_code = 415
    error_code = "UNSUPPORTED_FORMAT"


class ExtractionError(AppError):
    """A document could be read but yielded no usable text."""

    status_code = 422
    error_code = "EXTRACTION_FAILED"


class ExternalServiceError(AppError):
    """The narrative analyzer was unreachable or answered with an invalid shape.

    Callers recover from this locally; it only reaches the API when nothing
    else could be returned.
    """

    status_code = 503
    error_code = "EXTERNAL_SERVICE_UNAVAILABLE"
