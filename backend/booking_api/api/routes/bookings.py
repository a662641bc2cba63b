"""
Booking endpoints. All seat accounting happens in the booking service.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.db.session import get_db
from booking_api.schemas.common import Pagination, MessageResponse
from booking_api.schemas.booking import (
    BookingCreate,
    BookingUpdate,
    BookingResponse,
    BookingListItem,
    BookingListResponse,
)
from booking_api.services.booking_service import (
    book_seats,
    update_booking,
    cancel_booking,
    get_user_bookings,
)
from booking_api.core.config import get_settings
from booking_api.core.security import get_current_user_id

settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Book seats for an event.

    Fails with 400 when the user already holds a booking for the event, when
    the seat count is not positive, or when not enough seats are left.
    """
    return await book_seats(db, user_id, booking_data.event_id, booking_data.seats)


@router.get("", response_model=BookingListResponse)
async def list_user_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The caller's bookings with event and organizer details."""
    rows, total = await get_user_bookings(db, user_id, page, limit)
    return BookingListResponse(
        bookings=[BookingListItem.model_validate(row) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.put("/{booking_id}", response_model=BookingResponse)
async def update_booking_endpoint(
    booking_id: int,
    booking_data: BookingUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Change the seat count of one of the caller's bookings."""
    return await update_booking(db, booking_id, user_id, booking_data.seats)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release its seats back to the event."""
    await cancel_booking(db, booking_id, user_id)
    return MessageResponse(message="Booking cancelled successfully")
