"""
Notes Procedure Set.

The `notes.*` procedures served by the batched transport. Each entry
names its kind (query or mutation), the schema its raw input is
validated with, and the service call it performs.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from notekeeper.backend.schemas.note import (
    DeleteResult,
    NoteCreate,
    NoteIdInput,
    NotePage,
    NoteQuery,
    NoteResponse,
    NoteUpdateInput,
)
from notekeeper.backend.services.note import NoteService

ProcedureKind = Literal["query", "mutation"]
Handler = Callable[[NoteService, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Procedure:
    """A callable procedure exposed by the transport."""

    path: str
    kind: ProcedureKind
    handler: Handler
    input_schema: type[BaseModel] | None = None


async def create(service: NoteService, data: NoteCreate) -> NoteResponse:
    return await service.create_note(data)


async def get_by_id(service: NoteService, data: NoteIdInput) -> NoteResponse:
    return await service.get_note(data.id)


async def get_all(service: NoteService, data: NoteQuery) -> NotePage:
    return await service.list_notes(data)


async def update(service: NoteService, data: NoteUpdateInput) -> NoteResponse:
    return await service.update_note(data.id, data.data)


async def delete(service: NoteService, data: NoteIdInput) -> DeleteResult:
    return await service.delete_note(data.id)


async def get_tags(service: NoteService, _: None) -> list[str]:
    return await service.list_tags()


PROCEDURES: dict[str, Procedure] = {
    procedure.path: procedure
    for procedure in (
        Procedure("notes.create", "mutation", create, NoteCreate),
        Procedure("notes.getById", "query", get_by_id, NoteIdInput),
        Procedure("notes.getAll", "query", get_all, NoteQuery),
        Procedure("notes.update", "mutation", update, NoteUpdateInput),
        Procedure("notes.delete", "mutation", delete, NoteIdInput),
        Procedure("notes.getTags", "query", get_tags),
    )
}


def get_procedure(path: str) -> Procedure | None:
    """Look up a procedure by its dotted path."""
    return PROCEDURES.get(path)
