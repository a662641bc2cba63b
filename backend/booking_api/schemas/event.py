"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from booking_api.schemas.common import Pagination


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    date: datetime
    location: str = Field(..., min_length=1, max_length=255)
    available_seats: int = Field(..., ge=0)


class EventUpdate(EventCreate):
    """PUT replaces every editable field."""


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    date: datetime
    location: str
    available_seats: int
    user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingDetails(BaseModel):
    id: int
    seats: int


class EventDetailResponse(EventResponse):
    has_booked: bool = Field(alias="hasBooked")
    booking_details: Optional[BookingDetails] = Field(alias="bookingDetails")
    booked_seats: int = Field(alias="bookedSeats")

    model_config = {"from_attributes": True, "populate_by_name": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    pagination: Pagination
