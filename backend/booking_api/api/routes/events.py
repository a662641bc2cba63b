"""
Event endpoints. Listing is public; everything else needs a bearer token.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.db.session import get_db
from booking_api.schemas.common import Pagination, MessageResponse
from booking_api.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventDetailResponse,
    EventListResponse,
)
from booking_api.services.event_service import (
    create_event,
    get_event_detail,
    list_events,
    update_event,
    delete_event,
)
from booking_api.core.config import get_settings
from booking_api.core.security import get_current_user_id

settings = get_settings()
router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create an event owned by the caller."""
    return await create_event(db, event_data, user_id)


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    """List all events, latest date first."""
    events, total = await list_events(db, page, limit)
    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in events],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event_endpoint(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Single event with the caller's booking status on it."""
    return await get_event_detail(db, event_id, user_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: int,
    event_data: EventUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await update_event(db, event_id, user_id, event_data)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event_endpoint(
    event_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete an owned event and every booking made on it."""
    await delete_event(db, event_id, user_id)
    return MessageResponse(message="Event and associated bookings deleted successfully")
