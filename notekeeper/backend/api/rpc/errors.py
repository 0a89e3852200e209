"""
Procedure Call Errors.

Error codes of the batched procedure transport and the conversion of
application exceptions into error items.

Error item shape:
    {
        "error": {
            "message": "Note not found",
            "code": -32004,
            "data": {"code": "NOT_FOUND", "httpStatus": 404, "path": "notes.getById"}
        }
    }
"""

from typing import Any

from notekeeper.backend.core.exceptions import (
    ApplicationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notekeeper.backend.core.logging import get_logger

logger = get_logger(__name__)

# Error name -> (JSON-RPC code, HTTP status)
RPC_ERROR_CODES: dict[str, tuple[int, int]] = {
    "PARSE_ERROR": (-32700, 400),
    "BAD_REQUEST": (-32600, 400),
    "NOT_FOUND": (-32004, 404),
    "METHOD_NOT_SUPPORTED": (-32005, 405),
    "INTERNAL_SERVER_ERROR": (-32603, 500),
}

# Map application exception types to error names
EXCEPTION_CODE_MAP: dict[type[ApplicationError], str] = {
    ValidationError: "BAD_REQUEST",
    NotFoundError: "NOT_FOUND",
    StorageError: "INTERNAL_SERVER_ERROR",
}


class ProcedureError(Exception):
    """Raised by the transport itself (unknown path, wrong method, bad payload)."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        if code not in RPC_ERROR_CODES:
            raise ValueError(f"Unknown procedure error code: {code}")
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


def http_status_for(code: str) -> int:
    """HTTP status associated with an error name."""
    return RPC_ERROR_CODES[code][1]


def error_item(
    code: str,
    message: str,
    path: str | None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build one error item of a procedure call response."""
    json_code, http_status = RPC_ERROR_CODES[code]
    data: dict[str, Any] = {
        "code": code,
        "httpStatus": http_status,
        "path": path,
    }
    if details:
        data["details"] = details
    return {"error": {"message": message, "code": json_code, "data": data}}


def error_item_from_exception(exc: Exception, path: str | None) -> dict[str, Any]:
    """
    Convert an exception raised while serving a call into an error item.

    Transport and application errors keep their message. Anything else
    is logged with its traceback and reported as a generic internal error.
    """
    if isinstance(exc, ProcedureError):
        logger.warning(
            "Procedure call rejected",
            extra={"path": path, "code": exc.code, "error": exc.message},
        )
        return error_item(exc.code, exc.message, path, exc.details)

    if isinstance(exc, ApplicationError):
        code = EXCEPTION_CODE_MAP.get(type(exc), "INTERNAL_SERVER_ERROR")
        details = exc.details if isinstance(exc, ValidationError) else None
        log_extra = {"path": path, "code": code, "error": exc.message}
        if http_status_for(code) >= 500:
            logger.error("Procedure call failed", extra=log_extra)
        else:
            logger.warning("Procedure call failed", extra=log_extra)
        return error_item(code, exc.message, path, details)

    logger.exception(
        "Unhandled exception in procedure call",
        extra={"path": path, "exception_type": type(exc).__name__},
    )
    return error_item("INTERNAL_SERVER_ERROR", "An unexpected error occurred", path)
