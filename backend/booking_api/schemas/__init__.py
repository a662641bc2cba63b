from booking_api.schemas.common import Pagination, MessageResponse
from booking_api.schemas.user import UserCreate, UserLogin, UserUpdate, UserResponse, LoginResponse
from booking_api.schemas.event import (
    EventCreate, EventUpdate, EventResponse, EventDetailResponse, EventListResponse,
)
from booking_api.schemas.booking import (
    BookingCreate, BookingUpdate, BookingResponse, BookingListItem, BookingListResponse,
)
from booking_api.schemas.profile import ProfileResponse, DashboardResponse, RoomResponse

__all__ = [
    "Pagination", "MessageResponse",
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "LoginResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventDetailResponse", "EventListResponse",
    "BookingCreate", "BookingUpdate", "BookingResponse", "BookingListItem", "BookingListResponse",
    "ProfileResponse", "DashboardResponse", "RoomResponse",
]
