"""
Pydantic schemas for booking-related request/response validation.

Seat counts are plain integers here: the booking service owns the
positivity check so that it reports InvalidSeatCount rather than a 422.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from booking_api.schemas.common import Pagination


class BookingCreate(BaseModel):
    event_id: int
    seats: int


class BookingUpdate(BaseModel):
    seats: int


class BookingResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    seats: int
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingListItem(BaseModel):
    id: int
    seats: int
    booking_date: datetime
    event_id: int
    title: str
    description: Optional[str]
    date: datetime
    location: str
    organizer_name: str
    organizer_email: str

    model_config = {"from_attributes": True}


class BookingListResponse(BaseModel):
    bookings: list[BookingListItem]
    pagination: Pagination
