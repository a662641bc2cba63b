"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from booking_api.api.routes import auth, profile, rooms, events, bookings

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(rooms.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
