"""
Profile and dashboard endpoints for the authenticated user.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.db.session import get_db
from booking_api.schemas.user import UserUpdate, UserResponse
from booking_api.schemas.profile import ProfileResponse, ProfileEvent, ProfileBooking, DashboardResponse
from booking_api.services.profile_service import get_profile, update_profile, get_dashboard
from booking_api.core.security import get_current_user_id

router = APIRouter(tags=["Profile"])


@router.get("/profile", response_model=ProfileResponse)
async def read_profile(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The user with the events they created and the bookings they hold."""
    profile = await get_profile(db, user_id)
    return ProfileResponse(
        user=UserResponse.model_validate(profile["user"]),
        events=[ProfileEvent.model_validate(e) for e in profile["events"]],
        bookings=[ProfileBooking.model_validate(b) for b in profile["bookings"]],
    )


@router.put("/profile", response_model=UserResponse)
async def edit_profile(
    user_data: UserUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await update_profile(db, user_id, user_data)


@router.get("/dashboard", response_model=DashboardResponse)
async def read_dashboard(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Counts, upcoming events, recent bookings and per-location tallies."""
    return await get_dashboard(db, user_id)
