"""
Note Schemas.

Pydantic schemas for note request validation and responses.
Output models serialize with camelCase aliases (createdAt, updatedAt),
which is the contract shared with the UI and the CLI client.
"""

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notekeeper.backend.core.pagination import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from notekeeper.backend.models.note import TITLE_MAX_LENGTH

Tag = Annotated[str, Field(min_length=1, description="Tag (non-empty)")]


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
        examples=["Shopping List"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Note content",
        examples=["Milk, bread, eggs"],
    )
    tags: list[Tag] = Field(
        default_factory=list,
        description="Ordered tags; duplicates are kept",
        examples=[["shopping", "personal"]],
    )


class NoteUpdate(BaseModel):
    """
    Schema for updating an existing note.

    Every field is optional. Omitted fields are left untouched; the
    service reads `model_dump(exclude_unset=True)`, so an omitted field
    and a supplied one are never confused. Explicit nulls are rejected.
    """

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        min_length=1,
        description="Note content",
    )
    tags: list[Tag] | None = Field(
        default=None,
        description="Replacement tag list",
    )

    @field_validator("title", "content", "tags", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field may be omitted but not null")
        return value


class NoteIdInput(BaseModel):
    """Input of the id-based procedures (getById, delete)."""

    id: str = Field(..., min_length=1, description="Note ID")


class NoteUpdateInput(BaseModel):
    """Input of the update procedure."""

    id: str = Field(..., min_length=1, description="Note ID")
    data: NoteUpdate


class NoteQuery(BaseModel):
    """Filter and page parameters of the listing procedure."""

    search: str | None = Field(
        default=None,
        description="Case-insensitive substring matched against title and content",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Keep notes sharing at least one of these tags",
    )
    page: int = Field(default=1, gt=0, strict=True, description="Page number (1-based)")
    limit: int = Field(
        default=DEFAULT_PAGE_LIMIT,
        strict=True,
        gt=0,
        le=MAX_PAGE_LIMIT,
        description="Page size",
    )


class NoteResponse(BaseModel):
    """Schema for a note in responses, with decoded tags."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content")
    tags: list[str] = Field(description="Tags in stored order")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        """Stored timestamps are naive UTC; mark them as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PageInfo(BaseModel):
    """Pagination block of a note listing."""

    page: int
    limit: int
    total: int
    pages: int


class NotePage(BaseModel):
    """Result of the listing procedure."""

    notes: list[NoteResponse]
    pagination: PageInfo


class DeleteResult(BaseModel):
    """Acknowledgment returned by the delete procedure."""

    success: bool = True
    message: str = "Note deleted successfully"
