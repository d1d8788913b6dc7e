"""
Eats Server: Place Route Handlers
====================================

What:  HTTP endpoints for creating, reading, editing, deleting, listing and
       moderating places.
How:   Parses the path/query/body, delegates to PlaceStore, returns JSON.
       Errors are raised as exceptions and formatted by the global handlers
       in main.py as `{"error": "..."}`.

Route Inventory:
    POST   /places                    → 201 created place
    GET    /places                    → 200 page of all places
    GET    /places/approved           → 200 page of approved places
    GET    /places/requested          → 200 page of places awaiting approval
    GET    /places/{id}               → 200 place | 404
    PUT    /places/{id}               → 200 stored place | 404
    DELETE /places/{id}               → 200 {"result": "success"} | 404
    PATCH  /places/{id}/approve       → 200 place with approved=true | 500
    PATCH  /places/{id}/disapprove    → 200 place with approved=false | 500

The static listing paths are registered before `/{place_id}` so that
"approved" and "requested" are never parsed as ids.
"""

import logging
import re
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eats.database import get_db_session
from eats.exceptions import ValidationError
from eats.pagination import PageWindow, page_window
from eats.schemas.place import (
    ErrorResponse,
    PlaceIn,
    PlaceResponse,
    ResultResponse,
)
from eats.services.place_store import place_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["Places"])

_PLACE_ID_PATTERN = re.compile(r"[0-9]+")

# Upper bound of the INTEGER primary key column
_MAX_PLACE_ID = 2_147_483_647

_ID_ERRORS = {
    400: {"description": "Invalid place ID or payload", "model": ErrorResponse},
    404: {"description": "Place not found", "model": ErrorResponse},
    500: {"description": "Database error", "model": ErrorResponse},
}

_MODERATION_ERRORS = {
    400: {"description": "Invalid place ID", "model": ErrorResponse},
    500: {"description": "Database error, including an unknown id", "model": ErrorResponse},
}


def parse_place_id(place_id: str) -> int:
    """
    Path dependency: the `{place_id}` segment as an int.

    Runs before the body is decoded and before any session is used, so a
    malformed id never reaches the database.
    """
    if not _PLACE_ID_PATTERN.fullmatch(place_id) or int(place_id) > _MAX_PLACE_ID:
        raise ValidationError(message="Invalid place ID", field="id")
    return int(place_id)


# ── Collection ────────────────────────────────────────────────────────────


@router.post(
    "",
    status_code=201,
    response_model=PlaceResponse,
    responses={
        400: {"description": "Invalid request payload", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Suggest a new place",
)
async def create_place(
    payload: PlaceIn,
    db: AsyncSession = Depends(get_db_session),
) -> PlaceResponse:
    """
    Store a new suggestion. It starts out unapproved and shows up under
    /places/requested until a moderator approves it.
    """
    logger.info("create_place name=%r", payload.name)
    place = await place_store.create_place(db, payload)
    return PlaceResponse.model_validate(place)


@router.get("", response_model=List[PlaceResponse], summary="List all places")
async def list_places(
    window: PageWindow = Depends(page_window),
    db: AsyncSession = Depends(get_db_session),
) -> List[PlaceResponse]:
    logger.info("list_places count=%d start=%d", window.count, window.start)
    places = await place_store.list_places(db, window.start, window.count)
    return [PlaceResponse.model_validate(p) for p in places]


@router.get("/approved", response_model=List[PlaceResponse], summary="List approved places")
async def list_approved_places(
    window: PageWindow = Depends(page_window),
    db: AsyncSession = Depends(get_db_session),
) -> List[PlaceResponse]:
    logger.info("list_approved_places count=%d start=%d", window.count, window.start)
    places = await place_store.list_approved(db, window.start, window.count)
    return [PlaceResponse.model_validate(p) for p in places]


@router.get(
    "/requested",
    response_model=List[PlaceResponse],
    summary="List places awaiting approval",
)
async def list_requested_places(
    window: PageWindow = Depends(page_window),
    db: AsyncSession = Depends(get_db_session),
) -> List[PlaceResponse]:
    logger.info("list_requested_places count=%d start=%d", window.count, window.start)
    places = await place_store.list_requested(db, window.start, window.count)
    return [PlaceResponse.model_validate(p) for p in places]


# ── Single place ──────────────────────────────────────────────────────────


@router.get(
    "/{place_id}",
    response_model=PlaceResponse,
    responses=_ID_ERRORS,
    summary="Get a place by ID",
)
async def get_place(
    place_id: int = Depends(parse_place_id),
    db: AsyncSession = Depends(get_db_session),
) -> PlaceResponse:
    logger.info("get_place id=%d", place_id)
    place = await place_store.get_place(db, place_id)
    return PlaceResponse.model_validate(place)


@router.put(
    "/{place_id}",
    response_model=PlaceResponse,
    responses=_ID_ERRORS,
    summary="Edit a place's details",
)
async def update_place(
    payload: PlaceIn,
    place_id: int = Depends(parse_place_id),
    db: AsyncSession = Depends(get_db_session),
) -> PlaceResponse:
    """
    Replace every content field of the place. The id always comes from the
    path and the approval state is left as is. Responds with the record as
    stored after the write.
    """
    logger.info("update_place id=%d", place_id)
    place = await place_store.update_place(db, place_id, payload)
    return PlaceResponse.model_validate(place)


@router.delete(
    "/{place_id}",
    response_model=ResultResponse,
    responses=_ID_ERRORS,
    summary="Delete a place",
)
async def delete_place(
    place_id: int = Depends(parse_place_id),
    db: AsyncSession = Depends(get_db_session),
) -> ResultResponse:
    logger.info("delete_place id=%d", place_id)
    await place_store.delete_place(db, place_id)
    return ResultResponse(result="success")


# ── Moderation ────────────────────────────────────────────────────────────


@router.patch(
    "/{place_id}/approve",
    response_model=PlaceResponse,
    responses=_MODERATION_ERRORS,
    summary="Approve a place",
)
async def approve_place(
    place_id: int = Depends(parse_place_id),
    db: AsyncSession = Depends(get_db_session),
) -> PlaceResponse:
    logger.info("approve_place id=%d", place_id)
    place = await place_store.approve_place(db, place_id)
    return PlaceResponse.model_validate(place)


@router.patch(
    "/{place_id}/disapprove",
    response_model=PlaceResponse,
    responses=_MODERATION_ERRORS,
    summary="Send a place back to the requested state",
)
async def disapprove_place(
    place_id: int = Depends(parse_place_id),
    db: AsyncSession = Depends(get_db_session),
) -> PlaceResponse:
    logger.info("disapprove_place id=%d", place_id)
    place = await place_store.disapprove_place(db, place_id)
    return PlaceResponse.model_validate(place)
