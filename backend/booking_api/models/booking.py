"""
Booking model representing a user's reservation for an event.

Key design decisions:
- Unique constraint on (event_id, user_id) is the authoritative guard
  against double-booking
- Cancelling deletes the row; its seats go back to the event
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from booking_api.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seats = Column(Integer, nullable=False)

    # Relationships
    user = relationship("User", back_populates="bookings")
    event = relationship("Event", back_populates="bookings")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_booking_event_user"),
        CheckConstraint("seats > 0", name="check_booking_seats_positive"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, seats={self.seats})>"
