"""
Base Schemas.

Standard API response schemas and input parsing shared by all transports.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.utils import utc_now

DataT = TypeVar("DataT")
SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ResponseMetadata(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Standard API response envelope.

    All REST responses use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


def validation_details(exc: PydanticValidationError) -> dict[str, Any]:
    """Field-level error payload in the same shape as request validation errors."""
    return {
        "validation_errors": [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Validation error"),
                "type": err.get("type", "unknown"),
            }
            for err in exc.errors()
        ]
    }


def parse_input(schema: type[SchemaT], payload: Any) -> SchemaT:
    """
    Validate a raw payload against a schema.

    Args:
        schema: Pydantic model to validate with
        payload: Decoded JSON value (None when the caller sent no input)

    Returns:
        Validated schema instance

    Raises:
        ValidationError: With field-level details when validation fails
    """
    try:
        return schema.model_validate({} if payload is None else payload)
    except PydanticValidationError as exc:
        details = validation_details(exc)
        first = details["validation_errors"][0] if details["validation_errors"] else None
        message = (
            f"Invalid input: {first['field'] or 'input'}: {first['message']}"
            if first else "Invalid input"
        )
        raise ValidationError(message, details=details) from exc
