"""
Rooms are not stored on their own: a room is the `location` string shared
by a user's events. Every operation here is scoped to the caller's events.
"""

from datetime import datetime, timezone

from sqlalchemy import select, update, delete, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.models.event import Event
from booking_api.models.booking import Booking
from booking_api.core.exceptions import NotFound
from booking_api.db.session import atomic
from booking_api.core.logging import get_logger

logger = get_logger(__name__)


async def list_rooms(db: AsyncSession, user_id: int) -> list[dict]:
    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(
            Event.location.label("name"),
            func.count(Event.id).label("event_count"),
            func.coalesce(func.sum(case((Event.date >= now, 1), else_=0)), 0).label("upcoming_count"),
        )
        .where(Event.user_id == user_id)
        .group_by(Event.location)
        .order_by(Event.location)
    )
    return [dict(row) for row in result.mappings().all()]


async def rename_room(db: AsyncSession, user_id: int, old_name: str, new_name: str) -> dict:
    """Move every event of the caller at `old_name` to `new_name`."""
    async with atomic(db):
        result = await db.execute(
            update(Event)
            .where(Event.user_id == user_id, Event.location == old_name)
            .values(location=new_name)
        )
        if result.rowcount == 0:
            raise NotFound("Room not found")

    logger.info("room_renamed", user_id=user_id, old_name=old_name, new_name=new_name, events=result.rowcount)
    return {"name": new_name, "event_count": result.rowcount}


async def delete_room(db: AsyncSession, user_id: int, name: str) -> int:
    """Delete the caller's events at `name` and their bookings. Returns the event count."""
    async with atomic(db):
        event_ids = list(
            (
                await db.execute(
                    select(Event.id)
                    .where(Event.user_id == user_id, Event.location == name)
                    .with_for_update()
                )
            ).scalars().all()
        )
        if not event_ids:
            raise NotFound("Room not found")

        await db.execute(delete(Booking).where(Booking.event_id.in_(event_ids)))
        await db.execute(delete(Event).where(Event.id.in_(event_ids)))

    logger.info("room_deleted", user_id=user_id, name=name, events=len(event_ids))
    return len(event_ids)
