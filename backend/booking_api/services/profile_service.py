"""
Profile and dashboard read models, plus profile updates.
"""

from collections import OrderedDict
from datetime import datetime, timezone

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.models.user import User
from booking_api.models.event import Event
from booking_api.models.booking import Booking
from booking_api.schemas.user import UserUpdate
from booking_api.core.exceptions import DuplicateEmail, NotFound
from booking_api.core.security import hash_password
from booking_api.services.auth_service import email_taken
from booking_api.core.logging import get_logger

logger = get_logger(__name__)

DASHBOARD_LIST_SIZE = 5


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


def _user_bookings_query(user_id: int):
    return (
        select(
            Booking.id,
            Booking.seats,
            Booking.created_at.label("booking_date"),
            Event.id.label("event_id"),
            Event.title,
            Event.date,
            Event.location,
        )
        .join(Event, Booking.event_id == Event.id)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )


async def get_profile(db: AsyncSession, user_id: int) -> dict:
    user = await get_user(db, user_id)

    events = await db.execute(
        select(Event).where(Event.user_id == user_id).order_by(Event.date.desc())
    )
    bookings = await db.execute(_user_bookings_query(user_id))

    return {
        "user": user,
        "events": list(events.scalars().all()),
        "bookings": [dict(row) for row in bookings.mappings().all()],
    }


async def update_profile(db: AsyncSession, user_id: int, user_data: UserUpdate) -> User:
    """Partial update of name, email and password. Raises DuplicateEmail on collision."""
    user = await get_user(db, user_id)
    changes = user_data.model_dump(exclude_unset=True, exclude_none=True)

    new_email = changes.get("email")
    if new_email and new_email != user.email and await email_taken(db, new_email, exclude_user_id=user_id):
        logger.warning("profile_update_failed", reason="email_exists", user_id=user_id)
        raise DuplicateEmail()

    password = changes.pop("password", None)
    if password:
        user.hashed_password = hash_password(password)
    for field, value in changes.items():
        setattr(user, field, value)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("profile_update_failed", reason="email_exists", user_id=user_id)
        raise DuplicateEmail() from exc

    logger.info(
        "profile_updated",
        user_id=user_id,
        fields=sorted(changes) + (["password"] if password else []),
    )
    return user


async def get_dashboard(db: AsyncSession, user_id: int) -> dict:
    """
    Counts of created events and bookings, the next upcoming events the user
    created or booked, the most recent bookings, and per-location tallies
    over the same set of events.
    """
    await get_user(db, user_id)
    now = datetime.now(timezone.utc)

    events_created = (
        await db.execute(select(func.count(Event.id)).where(Event.user_id == user_id))
    ).scalar_one()
    bookings_made, seats_booked = (
        await db.execute(
            select(func.count(Booking.id), func.coalesce(func.sum(Booking.seats), 0))
            .where(Booking.user_id == user_id)
        )
    ).one()

    booked_event_ids = select(Booking.event_id).where(Booking.user_id == user_id)
    related = await db.execute(
        select(Event)
        .where(or_(Event.user_id == user_id, Event.id.in_(booked_event_ids)))
        .order_by(Event.date.asc(), Event.id.asc())
    )
    related_events = list(related.scalars().all())

    upcoming = [e for e in related_events if _as_utc(e.date) >= now]
    upcoming_events = [
        {
            "id": e.id,
            "title": e.title,
            "date": e.date,
            "location": e.location,
            "available_seats": e.available_seats,
            "relation": "created" if e.user_id == user_id else "booked",
        }
        for e in upcoming[:DASHBOARD_LIST_SIZE]
    ]

    tallies: "OrderedDict[str, dict]" = OrderedDict()
    for event in sorted(related_events, key=lambda e: e.location):
        tally = tallies.setdefault(
            event.location,
            {"location": event.location, "event_count": 0, "upcoming_count": 0},
        )
        tally["event_count"] += 1
        if _as_utc(event.date) >= now:
            tally["upcoming_count"] += 1

    recent = await db.execute(_user_bookings_query(user_id).limit(DASHBOARD_LIST_SIZE))

    return {
        "stats": {
            "events_created": events_created,
            "bookings_made": bookings_made,
            "seats_booked": seats_booked,
        },
        "upcoming_events": upcoming_events,
        "recent_bookings": [dict(row) for row in recent.mappings().all()],
        "locations": list(tallies.values()),
    }
