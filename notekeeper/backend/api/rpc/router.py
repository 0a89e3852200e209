"""
Batched Procedure Transport.

Serves the procedure set over HTTP:

- GET  {rpc.path}/{paths}  queries
- POST {rpc.path}/{paths}  mutations

`paths` is a comma-separated list of procedure paths. With `?batch=1`
the input is an object keyed by call index ("0", "1", ...) taken from
the `input` query parameter (GET) or the body (POST), and the response
is an array with one item per call. Without `batch` exactly one path is
allowed and the input is the raw JSON value.

Every call runs in its own session: a failing call rolls back only
itself and never affects the other items of the batch.
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.backend.api.rpc.errors import (
    ProcedureError,
    error_item,
    error_item_from_exception,
)
from notekeeper.backend.api.rpc.procedures import ProcedureKind, get_procedure
from notekeeper.backend.core.config import get_app_config
from notekeeper.backend.core.database import session_scope
from notekeeper.backend.core.dependencies import SessionFactory
from notekeeper.backend.core.logging import get_logger, procedure_context
from notekeeper.backend.schemas.base import parse_input
from notekeeper.backend.services.note import NoteService

router = APIRouter()
logger = get_logger(__name__)

MULTI_STATUS = 207
_BATCH_FLAGS = {"1", "true"}


def _is_batch(request: Request) -> bool:
    return request.query_params.get("batch", "").lower() in _BATCH_FLAGS


def _decode_json(raw: str | bytes | None) -> Any:
    """Decode a JSON payload; an absent or empty payload means no input."""
    if raw is None or raw in ("", b""):
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProcedureError("PARSE_ERROR", f"Invalid JSON input: {e}") from e


async def _read_raw_input(request: Request, kind: ProcedureKind) -> Any:
    if kind == "query":
        return _decode_json(request.query_params.get("input"))
    return _decode_json(await request.body())


def _split_inputs(raw: Any, count: int, batch: bool) -> list[Any]:
    """Assign one raw input to each call of the request."""
    if not batch:
        return [raw]
    if raw is None:
        return [None] * count
    if not isinstance(raw, dict):
        raise ProcedureError(
            "BAD_REQUEST",
            "Batch input must be an object keyed by call index",
        )
    return [raw.get(str(index)) for index in range(count)]


def _validate_request(paths: list[str], batch: bool) -> None:
    if not batch:
        if len(paths) != 1:
            raise ProcedureError(
                "BAD_REQUEST",
                "Multiple procedure paths require batch=1",
            )
        return

    app_config = get_app_config()
    if not app_config.features.rpc_batching_enabled:
        raise ProcedureError("BAD_REQUEST", "Batching is disabled")

    max_batch_size = app_config.application.rpc.max_batch_size
    if len(paths) > max_batch_size:
        raise ProcedureError(
            "BAD_REQUEST",
            f"Batch of {len(paths)} calls exceeds the limit of {max_batch_size}",
        )


async def call_procedure(
    path: str,
    kind: ProcedureKind,
    raw_input: Any,
    session_factory: async_sessionmaker[AsyncSession],
) -> dict[str, Any]:
    """
    Run a single procedure call and build its response item.

    Input is validated before a session is opened, so an invalid call
    never reaches storage.

    Returns:
        `{"result": {"data": ...}}` on success, an error item otherwise
    """
    with procedure_context(path):
        try:
            procedure = get_procedure(path)
            if procedure is None:
                raise ProcedureError("NOT_FOUND", f'No {kind} procedure on path "{path}"')
            if procedure.kind != kind:
                method = "POST" if kind == "mutation" else "GET"
                raise ProcedureError(
                    "METHOD_NOT_SUPPORTED",
                    f"Unsupported {method} request to {procedure.kind} procedure",
                )

            data = None
            if procedure.input_schema is not None:
                data = parse_input(procedure.input_schema, raw_input)

            async with session_scope(session_factory) as session:
                result = await procedure.handler(NoteService(session), data)

            return {"result": {"data": jsonable_encoder(result)}}
        except Exception as e:
            return error_item_from_exception(e, path)


def _item_status(item: dict[str, Any]) -> int:
    if "error" in item:
        return item["error"]["data"]["httpStatus"]
    return 200


def _response(items: list[dict[str, Any]], batch: bool) -> JSONResponse:
    statuses = {_item_status(item) for item in items}
    status_code = statuses.pop() if len(statuses) == 1 else MULTI_STATUS
    content: Any = items if batch else items[0]
    return JSONResponse(status_code=status_code, content=content)


async def _handle(
    request: Request,
    paths: str,
    kind: ProcedureKind,
    session_factory: async_sessionmaker[AsyncSession],
) -> JSONResponse:
    path_list = paths.split(",")
    batch = _is_batch(request)

    try:
        _validate_request(path_list, batch)
        raw = await _read_raw_input(request, kind)
        inputs = _split_inputs(raw, len(path_list), batch)
    except ProcedureError as e:
        logger.warning(
            "Procedure request rejected",
            extra={"paths": path_list, "code": e.code, "error": e.message},
        )
        items = [error_item(e.code, e.message, path, e.details) for path in path_list]
        return _response(items, batch)

    logger.debug(
        "Serving procedure calls",
        extra={"kind": kind, "paths": path_list, "batch": batch},
    )

    items = [
        await call_procedure(path, kind, raw_input, session_factory)
        for path, raw_input in zip(path_list, inputs)
    ]
    return _response(items, batch)


@router.get("/{paths}", summary="Run query procedures")
async def run_queries(
    paths: str,
    request: Request,
    session_factory: SessionFactory,
) -> JSONResponse:
    """Serve one or more query procedures."""
    return await _handle(request, paths, "query", session_factory)


@router.post("/{paths}", summary="Run mutation procedures")
async def run_mutations(
    paths: str,
    request: Request,
    session_factory: SessionFactory,
) -> JSONResponse:
    """Serve one or more mutation procedures."""
    return await _handle(request, paths, "mutation", session_factory)
