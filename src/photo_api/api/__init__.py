"""API route aggregation.

All routers registered here get mounted in main.py. Health is open;
photo routes authenticate per-route through get_current_user, since the
handlers need the resolved identity.
"""

from fastapi import APIRouter

from photo_api.api.health import router as health_router
from photo_api.api.photos import router as photos_router

api_router = APIRouter()

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])

# Protected routes — require a valid bearer token for an existing user
api_router.include_router(photos_router, tags=["photos"])
