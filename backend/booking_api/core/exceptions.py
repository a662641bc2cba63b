"""
Domain errors raised by the services.

Each error carries the HTTP status it maps to; the handlers registered in
main.py render every one of them as {"error": message}.
"""

from typing import Optional

from fastapi import status


class BookingAPIError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(BookingAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidCredentials(BookingAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(BookingAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class NotFound(BookingAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NotFoundOrForbidden(NotFound):
    """No row matched both the id and the caller's ownership."""

    default_message = "Not found or not authorized"


class DuplicateEmail(BookingAPIError):
    default_message = "Email already exists"


class AlreadyBooked(BookingAPIError):
    default_message = "You have already booked this event"


class InsufficientSeats(BookingAPIError):
    default_message = "Not enough seats available"


class InvalidSeatCount(BookingAPIError):
    default_message = "Seats must be a positive integer"
