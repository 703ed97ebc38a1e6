"""Photo service — business logic for listing, fetching and creating photos.

Learn: Service layer separates business logic from HTTP routing.
Routes resolve the identity and translate exceptions to status codes;
the service talks to the database and runs validation.
"""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from photo_api.db.models import Photo
from photo_api.validation import validate_new_photo

logger = structlog.get_logger()


class PhotoNotFoundError(Exception):
    """Raised when a photo is not found."""


class PhotoService:
    """Reads and writes photos for an authenticated user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_photos(self) -> list[Photo]:
        result = await self.db.execute(select(Photo).order_by(Photo.id))
        return list(result.scalars().all())

    async def get_photo(self, photo_id: int) -> Photo:
        """Fetch one photo with its owner loaded."""
        q = (
            select(Photo)
            .where(Photo.id == photo_id)
            .options(selectinload(Photo.user))
        )
        result = await self.db.execute(q)
        photo = result.scalars().first()
        if photo is None:
            raise PhotoNotFoundError(f"Photo {photo_id} not found")
        return photo

    async def create_photo(self, data: dict[str, Any], owner_id: int) -> Photo:
        """Validate and insert a photo owned by owner_id.

        Raises PhotoValidationError before touching the database.
        """
        photo = Photo(**validate_new_photo(data, owner_id))
        self.db.add(photo)
        await self.db.commit()
        # Pull server-assigned timestamps
        await self.db.refresh(photo)
        logger.info("photos.created", photo_id=photo.id, user_id=owner_id)
        return photo
