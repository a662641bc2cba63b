"""
Booking service: seat accounting for events.

CONSISTENCY STRATEGY
====================

Invariant:
  events.available_seats >= 0, and it moves by exactly the seats a booking
  takes (create), gives back (cancel) or changes by (update).

Every create/update/cancel runs inside a single `atomic()` transaction:

  1. Lock the event row with SELECT ... FOR UPDATE, so concurrent bookings
     for the same event queue behind each other instead of interleaving
     between the seat check and the write. The event is always locked
     before any of its bookings, the same order event and room deletes use.
  2. Validate against the locked row (seat checks, ownership).
  3. Apply the seat change as a conditional
     UPDATE events SET available_seats = available_seats - N
     WHERE id = :event_id AND available_seats >= N
     A zero rowcount means the seats are gone -> InsufficientSeats.
  4. Commit. Any failure rolls back the booking row and the seat change
     together.

Double-booking:
  The pre-check gives a clean AlreadyBooked error in the common case. The
  UNIQUE(event_id, user_id) constraint is the real guard; when two requests
  race past the pre-check, the loser's IntegrityError is reported as
  AlreadyBooked too.
"""

import time
from contextlib import asynccontextmanager

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.models.event import Event
from booking_api.models.booking import Booking
from booking_api.models.user import User
from booking_api.core.exceptions import (
    BookingAPIError,
    AlreadyBooked,
    InsufficientSeats,
    InvalidSeatCount,
    NotFound,
    NotFoundOrForbidden,
)
from booking_api.core.metrics import booking_latency, record_booking_operation
from booking_api.db.session import atomic
from booking_api.core.logging import get_logger

logger = get_logger(__name__)

BOOKING_NOT_OWNED = "Booking not found or not authorized"


@asynccontextmanager
async def _instrumented(operation: str):
    start = time.perf_counter()
    try:
        yield
    except BookingAPIError as exc:
        record_booking_operation(operation, type(exc).__name__)
        raise
    except Exception:
        record_booking_operation(operation, "error")
        raise
    else:
        record_booking_operation(operation, "success")
    finally:
        booking_latency.labels(operation=operation).observe(time.perf_counter() - start)


async def _lock_event(db: AsyncSession, event_id: int) -> Event:
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()
    if not event:
        raise NotFound("Event not found")
    return event


async def _lock_own_booking(
    db: AsyncSession,
    booking_id: int,
    user_id: int,
) -> tuple[Booking, Event]:
    """
    Lock a user's booking together with its event, event row first, the
    same order event and room deletes take their locks in.
    """
    event_id = (
        await db.execute(
            select(Booking.event_id).where(Booking.id == booking_id, Booking.user_id == user_id)
        )
    ).scalar_one_or_none()
    if event_id is None:
        raise NotFoundOrForbidden(BOOKING_NOT_OWNED)

    try:
        event = await _lock_event(db, event_id)
    except NotFound as exc:
        # Event deleted between the lookup and the lock
        raise NotFoundOrForbidden(BOOKING_NOT_OWNED) from exc

    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id, Booking.user_id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundOrForbidden(BOOKING_NOT_OWNED)
    return booking, event


async def _adjust_available_seats(db: AsyncSession, event_id: int, delta: int) -> None:
    """Add `delta` (negative to consume) to the event's available seats."""
    if delta == 0:
        return

    stmt = update(Event).where(Event.id == event_id)
    if delta < 0:
        stmt = stmt.where(Event.available_seats >= -delta)
    result = await db.execute(stmt.values(available_seats=Event.available_seats + delta))

    if result.rowcount == 0:
        raise InsufficientSeats()


async def book_seats(
    db: AsyncSession,
    user_id: int,
    event_id: int,
    seats: int,
) -> Booking:
    """Reserve `seats` on an event the user has not booked yet."""
    async with _instrumented("create"):
        if seats <= 0:
            raise InvalidSeatCount()

        try:
            async with atomic(db):
                existing = await db.execute(
                    select(Booking.id).where(
                        Booking.event_id == event_id,
                        Booking.user_id == user_id,
                    )
                )
                if existing.scalar_one_or_none() is not None:
                    raise AlreadyBooked()

                event = await _lock_event(db, event_id)

                if event.available_seats < seats:
                    logger.warning(
                        "booking_failed_no_seats",
                        event_id=event_id,
                        requested=seats,
                        available=event.available_seats,
                    )
                    raise InsufficientSeats()

                booking = Booking(event_id=event_id, user_id=user_id, seats=seats)
                db.add(booking)
                await db.flush()
                await _adjust_available_seats(db, event_id, -seats)
        except IntegrityError as exc:
            logger.warning("booking_conflict", event_id=event_id, user_id=user_id)
            raise AlreadyBooked() from exc

        await db.refresh(booking)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        event_id=event_id,
        seats=seats,
    )
    return booking


async def update_booking(
    db: AsyncSession,
    booking_id: int,
    user_id: int,
    new_seats: int,
) -> Booking:
    """
    Change a booking's seat count. The event gives up (or gets back) exactly
    the difference between the new and the current count.
    """
    async with _instrumented("update"):
        if new_seats <= 0:
            raise InvalidSeatCount()

        async with atomic(db):
            booking, event = await _lock_own_booking(db, booking_id, user_id)

            delta = new_seats - booking.seats
            if event.available_seats < delta:
                logger.warning(
                    "booking_update_failed_no_seats",
                    booking_id=booking_id,
                    requested_delta=delta,
                    available=event.available_seats,
                )
                raise InsufficientSeats()

            old_seats = booking.seats
            booking.seats = new_seats
            await _adjust_available_seats(db, event.id, -delta)

    logger.info(
        "booking_updated",
        booking_id=booking.id,
        user_id=user_id,
        event_id=booking.event_id,
        old_seats=old_seats,
        new_seats=new_seats,
    )
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int, user_id: int) -> None:
    """Delete a booking and release its seats back to the event."""
    async with _instrumented("cancel"):
        async with atomic(db):
            booking, _ = await _lock_own_booking(db, booking_id, user_id)
            event_id, seats = booking.event_id, booking.seats
            await db.delete(booking)
            await db.flush()
            await _adjust_available_seats(db, event_id, seats)

    logger.info(
        "booking_cancelled",
        booking_id=booking_id,
        user_id=user_id,
        event_id=event_id,
        seats_restored=seats,
    )


async def get_user_bookings(
    db: AsyncSession,
    user_id: int,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[dict], int]:
    """A user's bookings joined with their event and the event's organizer."""
    total = (
        await db.execute(select(func.count(Booking.id)).where(Booking.user_id == user_id))
    ).scalar_one()

    organizer = User.__table__.alias("organizer")
    result = await db.execute(
        select(
            Booking.id,
            Booking.seats,
            Booking.created_at.label("booking_date"),
            Event.id.label("event_id"),
            Event.title,
            Event.description,
            Event.date,
            Event.location,
            organizer.c.name.label("organizer_name"),
            organizer.c.email.label("organizer_email"),
        )
        .join(Event, Booking.event_id == Event.id)
        .join(organizer, Event.user_id == organizer.c.id)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return [dict(row) for row in result.mappings().all()], total
