"""Error types and the JSON error envelope returned by the reporting API.

Upstream outages are not errors at this level: the fetcher absorbs them and
serves fallback payloads. What reaches these handlers is caller mistakes
(bad query parameters, negative limits) and genuine bugs.
"""

import logging
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for application errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppError):
    """Caller supplied a value the reporting views cannot work with (400)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid input", field: str | None = None):
        super().__init__(message, {"field": field} if field else None)


class ExternalServiceError(AppError):
    """An upstream provider could not be used (502)."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, message: str = "Upstream service error", service: str | None = None):
        super().__init__(message, {"service": service} if service else None)
        self.service = service


class MalformedPayloadError(ExternalServiceError):
    """Upstream answered with a body that does not have the expected shape."""

    error_code = "MALFORMED_PAYLOAD"

    def __init__(self, message: str = "Malformed upstream payload", service: str | None = None):
        super().__init__(message=message, service=service)


def _error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or None,
            "request_id": request_id,
        },
    }


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as the JSON error envelope."""
    logger.warning(
        "%s on %s: %s",
        exc.error_code,
        request.url.path,
        exc.message,
        extra={"details": exc.details},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message, exc.details),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI query/path validation failures in the same envelope."""
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("REQUEST_VALIDATION_ERROR", "Invalid request parameters", errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with a generic error response."""
    logger.exception("Unhandled exception on %s: %s", request.url.path, str(exc))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
        debug: If True, unhandled exceptions propagate with stack traces.
    """
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, request_validation_handler  # type: ignore[arg-type]
    )
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
