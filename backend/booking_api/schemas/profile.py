"""
Read models for the profile, dashboard and room endpoints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from booking_api.schemas.user import UserResponse


class ProfileEvent(BaseModel):
    id: int
    title: str
    date: datetime
    location: str
    available_seats: int

    model_config = {"from_attributes": True}


class ProfileBooking(BaseModel):
    id: int
    seats: int
    booking_date: datetime
    event_id: int
    title: str
    date: datetime
    location: str

    model_config = {"from_attributes": True}


class ProfileResponse(BaseModel):
    user: UserResponse
    events: list[ProfileEvent]
    bookings: list[ProfileBooking]


class DashboardStats(BaseModel):
    events_created: int
    bookings_made: int
    seats_booked: int


class UpcomingEvent(BaseModel):
    id: int
    title: str
    date: datetime
    location: str
    available_seats: int
    relation: Literal["created", "booked"]


class LocationTally(BaseModel):
    location: str
    event_count: int
    upcoming_count: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    upcoming_events: list[UpcomingEvent]
    recent_bookings: list[ProfileBooking]
    locations: list[LocationTally]


class RoomResponse(BaseModel):
    name: str
    event_count: int
    upcoming_count: int


class RoomRename(BaseModel):
    old_name: str = Field(..., min_length=1, max_length=255)
    new_name: str = Field(..., min_length=1, max_length=255)


class RoomRenameResponse(BaseModel):
    name: str
    event_count: int


class RoomDeleteResponse(BaseModel):
    message: str
    deleted_events: int
