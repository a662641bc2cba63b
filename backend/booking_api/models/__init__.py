from booking_api.models.user import User
from booking_api.models.event import Event
from booking_api.models.booking import Booking

__all__ = ["User", "Event", "Booking"]
