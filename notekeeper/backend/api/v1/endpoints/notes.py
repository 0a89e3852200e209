"""
Notes API Endpoints.

REST API endpoints for note management. Same operations and rules as
the `notes.*` procedures, wrapped in the standard ApiResponse envelope.
"""

from fastapi import APIRouter, Depends, Query

from notekeeper.backend.core.dependencies import DbSession, RequestId
from notekeeper.backend.core.pagination import PageParams, get_page_params
from notekeeper.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeeper.backend.schemas.note import (
    DeleteResult,
    NoteCreate,
    NotePage,
    NoteQuery,
    NoteResponse,
    NoteUpdate,
)
from notekeeper.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a new note with title, content and optional tags.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(data)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=ApiResponse[NotePage],
    summary="List notes (paginated)",
    description=(
        "List notes, most recently updated first. `search` matches title or "
        "content case-insensitively; `tags` keeps notes having any of the tags."
    ),
)
async def list_notes(
    db: DbSession,
    request_id: RequestId,
    pagination: PageParams = Depends(get_page_params),
    search: str | None = Query(
        default=None,
        description="Case-insensitive search in title and content",
    ),
    tags: list[str] | None = Query(
        default=None,
        description="Tag filter (repeatable, any tag matches)",
    ),
) -> ApiResponse[NotePage]:
    """List notes with search, tag filter and pagination."""
    service = NoteService(db)
    query = NoteQuery(
        search=search,
        tags=tags,
        page=pagination.page,
        limit=pagination.limit,
    )
    page = await service.list_notes(query)
    return ApiResponse(data=page, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/tags",
    response_model=ApiResponse[list[str]],
    summary="List tags",
    description="All distinct tags in use, sorted ascending.",
)
async def list_tags(
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[str]]:
    """List all distinct tags."""
    service = NoteService(db)
    tags = await service.list_tags()
    return ApiResponse(data=tags, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(note_id, data)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    """Delete a note."""
    service = NoteService(db)
    result = await service.delete_note(note_id)
    return ApiResponse(data=result, metadata=ResponseMetadata(request_id=request_id))
