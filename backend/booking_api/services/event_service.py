"""
Event service handling CRUD operations.

Writes are owner-scoped: the owner check is part of the row predicate, so a
missing event and somebody else's event both surface as NotFoundOrForbidden.
"""

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.models.event import Event
from booking_api.models.booking import Booking
from booking_api.schemas.event import EventCreate, EventUpdate
from booking_api.core.exceptions import NotFound, NotFoundOrForbidden
from booking_api.db.session import atomic
from booking_api.core.logging import get_logger

logger = get_logger(__name__)

EVENT_NOT_OWNED = "Event not found or not authorized"


async def create_event(db: AsyncSession, event_data: EventCreate, owner_id: int) -> Event:
    event = Event(**event_data.model_dump(), user_id=owner_id)
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, title=event.title, seats=event.available_seats)
    return event


async def get_event(db: AsyncSession, event_id: int) -> Event:
    """Get a single event by ID."""
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFound("Event not found")
    return event


async def get_event_detail(db: AsyncSession, event_id: int, requester_id: int) -> dict:
    """
    Event plus the requester's booking on it (if any) and the total number
    of seats booked on it by everyone.
    """
    event = await get_event(db, event_id)

    own_booking = (
        await db.execute(
            select(Booking.id, Booking.seats).where(
                Booking.event_id == event_id,
                Booking.user_id == requester_id,
            )
        )
    ).first()

    booked_seats = (
        await db.execute(
            select(func.coalesce(func.sum(Booking.seats), 0)).where(Booking.event_id == event_id)
        )
    ).scalar_one()

    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "date": event.date,
        "location": event.location,
        "available_seats": event.available_seats,
        "user_id": event.user_id,
        "created_at": event.created_at,
        "has_booked": own_booking is not None,
        "booking_details": dict(own_booking._mapping) if own_booking else None,
        "booked_seats": booked_seats,
    }


async def list_events(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Event], int]:
    """List events newest date first. Uses the ix_events_date index."""
    total = (await db.execute(select(func.count(Event.id)))).scalar_one()

    result = await db.execute(
        select(Event)
        .order_by(Event.date.desc(), Event.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    events = list(result.scalars().all())

    return events, total


async def _get_owned_event_for_update(db: AsyncSession, event_id: int, owner_id: int) -> Event:
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id, Event.user_id == owner_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()
    if not event:
        raise NotFoundOrForbidden(EVENT_NOT_OWNED)
    return event


async def update_event(
    db: AsyncSession,
    event_id: int,
    owner_id: int,
    event_data: EventUpdate,
) -> Event:
    async with atomic(db):
        event = await _get_owned_event_for_update(db, event_id, owner_id)
        for field, value in event_data.model_dump().items():
            setattr(event, field, value)

    logger.info("event_updated", event_id=event.id, owner_id=owner_id)
    return event


async def delete_event(db: AsyncSession, event_id: int, owner_id: int) -> None:
    """Delete an owned event together with all of its bookings."""
    async with atomic(db):
        event = await _get_owned_event_for_update(db, event_id, owner_id)
        removed = await db.execute(delete(Booking).where(Booking.event_id == event.id))
        await db.execute(delete(Event).where(Event.id == event.id))

    logger.info(
        "event_deleted",
        event_id=event_id,
        owner_id=owner_id,
        bookings_removed=removed.rowcount,
    )
