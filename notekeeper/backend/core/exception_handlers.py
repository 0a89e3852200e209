"""
Exception Handlers.

FastAPI exception handlers for the REST surface. Application exceptions,
request validation failures and unexpected errors all become an
ErrorResponse envelope carrying the request ID.

The procedure transport does not go through these handlers; it converts
exceptions into error items itself (see api/rpc/errors.py).

Usage:
    from notekeeper.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notekeeper.backend.core.exceptions import (
    ApplicationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Map exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    StorageError: 503,
}

REQUEST_VALIDATION_STATUS = 422


def status_for(exc: ApplicationError) -> int:
    """HTTP status code for an application exception (500 when unmapped)."""
    return EXCEPTION_STATUS_MAP.get(type(exc), 500)


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _error_response(
    request: Request,
    status_code: int,
    error: ErrorDetail,
) -> JSONResponse:
    response = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json"),
    )


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle all ApplicationError subclasses.

    NotFoundError and ValidationError are client errors and logged as
    warnings; StorageError and unmapped errors are logged as errors.
    """
    status_code = status_for(exc)

    log_extra = {
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
    }
    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return _error_response(
        request,
        status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=details),
    )


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request validation errors raised by FastAPI.

    Field errors are reported under details.validation_errors in the
    same shape the procedure transport uses for invalid input.
    """
    errors = exc.errors()

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "request_id": _get_request_id(request),
        },
    )

    details = {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "unknown"),
            }
            for err in errors
        ]
    }
    return _error_response(
        request,
        REQUEST_VALIDATION_STATUS,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details=details,
        ),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Log the traceback and return a generic 500 without internal details."""
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": _get_request_id(request),
        },
    )

    return _error_response(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
