"""
Room endpoints. A room is the location shared by the caller's events.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.db.session import get_db
from booking_api.schemas.profile import RoomResponse, RoomRename, RoomRenameResponse, RoomDeleteResponse
from booking_api.services.room_service import list_rooms, rename_room, delete_room
from booking_api.core.security import get_current_user_id

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("", response_model=list[RoomResponse])
async def list_rooms_endpoint(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await list_rooms(db, user_id)


@router.post("", response_model=RoomRenameResponse)
async def rename_room_endpoint(
    rename: RoomRename,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Rename a room across all of the caller's events held there."""
    return await rename_room(db, user_id, rename.old_name, rename.new_name)


@router.delete("/{name}", response_model=RoomDeleteResponse)
async def delete_room_endpoint(
    name: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete every event the caller holds in the room, with their bookings."""
    deleted = await delete_room(db, user_id, name)
    return RoomDeleteResponse(message=f"Room '{name}' deleted", deleted_events=deleted)
