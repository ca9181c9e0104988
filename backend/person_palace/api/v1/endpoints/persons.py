"""
Persons endpoints (proxy in front of the persons backend).
List (with client-side sort), create, update, delete.
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from person_palace.schemas.common import ErrorDetail, MessageResponse
from person_palace.schemas.person import (
    Person,
    PersonCreate,
    PersonListResponse,
    PersonUpdate,
)
from person_palace.services.person_service import (
    PersonService,
    RequestError,
    get_person_service,
)
from person_palace.ui.table import COLUMNS, sort_persons

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/persons",
    tags=["persons"],
    responses={502: {"model": ErrorDetail, "description": "Persons backend error"}},
)


def _to_http_error(e: RequestError) -> HTTPException:
    logger.warning("Persons backend error: %s (status %s)", e.message, e.status_code)
    if e.status_code == 404:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Person not found")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=e.message or "Persons backend error",
    )


@router.get(
    "",
    response_model=PersonListResponse,
    summary="List persons",
    description="Fetch every person from the backend, optionally sorted by one column.",
)
async def list_persons(
    sort: str | None = Query(None, description=f"Sort column: {', '.join(COLUMNS)}"),
    direction: Literal["asc", "desc"] = Query("asc", description="Sort direction"),
    persons: PersonService = Depends(get_person_service),
) -> PersonListResponse:
    """GET /api/v1/persons: fetch from the backend; missing values sort last."""
    if sort is not None and sort not in COLUMNS:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown sort column: {sort}",
        )
    try:
        records = persons.list_persons()
    except RequestError as e:
        raise _to_http_error(e)
    return PersonListResponse(persons=sort_persons(records, sort, direction))


@router.post(
    "",
    response_model=Person,
    status_code=status.HTTP_201_CREATED,
    summary="Create person",
)
async def create_person(
    body: PersonCreate,
    persons: PersonService = Depends(get_person_service),
) -> Person:
    """POST /api/v1/persons: create in the backend."""
    try:
        return persons.create_person(body)
    except RequestError as e:
        raise _to_http_error(e)


@router.put(
    "/{person_id}",
    response_model=Person,
    summary="Update person",
)
async def update_person(
    person_id: str,
    body: PersonUpdate,
    persons: PersonService = Depends(get_person_service),
) -> Person:
    """PUT /api/v1/persons/{person_id}: partial update; only fields in the body change."""
    try:
        return persons.update_person(person_id, body)
    except RequestError as e:
        raise _to_http_error(e)


@router.delete(
    "/{person_id}",
    response_model=MessageResponse,
    summary="Delete person",
)
async def delete_person(
    person_id: str,
    persons: PersonService = Depends(get_person_service),
) -> MessageResponse:
    """DELETE /api/v1/persons/{person_id}: irreversible."""
    try:
        persons.delete_person(person_id)
    except RequestError as e:
        raise _to_http_error(e)
    return MessageResponse(message="Person deleted successfully")
