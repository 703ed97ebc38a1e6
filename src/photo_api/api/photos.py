"""Photo API routes.

Learn: Every route depends on get_current_user, so the auth gate runs
before any body validation or database work. Routes handle HTTP concerns
(status codes, error responses), PhotoService handles the rest.

- GET  /photos       → all photos, owner as a bare UserId
- GET  /photos/{id}  → one photo with its owner's public fields
- POST /photos       → create a photo owned by the caller
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from photo_api.auth.dependencies import CurrentIdentity, get_current_user
from photo_api.db.engine import get_db
from photo_api.db.models import MAX_ROW_ID
from photo_api.schemas.photo import PhotoDetail, PhotoRead
from photo_api.services.photo_service import PhotoNotFoundError, PhotoService
from photo_api.validation import PhotoValidationError

router = APIRouter(prefix="/photos")

NOT_FOUND = "Data not found"
MALFORMED_BODY = "Malformed JSON body"
NOT_AN_OBJECT = "Request body must be a JSON object"


def _svc(db: AsyncSession = Depends(get_db)) -> PhotoService:
    return PhotoService(db)


@router.get("", response_model=list[PhotoRead])
async def list_photos(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PhotoService = Depends(_svc),
):
    return await svc.list_photos()


@router.get("/{photo_id}", response_model=PhotoDetail)
async def get_photo(
    photo_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PhotoService = Depends(_svc),
):
    # Ids that can't be a row id (non-numeric, beyond 64-bit) are plain misses
    if (
        not photo_id.isdecimal()
        or len(photo_id) > len(str(MAX_ROW_ID))
        or int(photo_id) > MAX_ROW_ID
    ):
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    try:
        return await svc.get_photo(int(photo_id))
    except PhotoNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body; an empty body is an empty object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=[MALFORMED_BODY])
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail=[NOT_AN_OBJECT])
    return data


@router.post("", response_model=PhotoRead, status_code=201)
async def create_photo(
    request: Request,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PhotoService = Depends(_svc),
):
    """Create a photo. Caption is derived, owner is the caller.

    The body is decoded here, after get_current_user, so a request
    without credentials is a 401 whatever its body looks like.
    """
    data = await _read_json_object(request)
    try:
        return await svc.create_photo(data, owner_id=identity.user_id)
    except PhotoValidationError as e:
        raise HTTPException(status_code=400, detail=e.messages)
