"""
Tests for room endpoints: rooms are the locations of a user's events.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from booking_api.models import Booking


@pytest.mark.asyncio
async def test_list_rooms(client: AsyncClient, auth_headers, test_event, small_event, past_event):
    response = await client.get("/api/rooms", headers=auth_headers)
    assert response.status_code == 200
    # past_event belongs to another user and is not counted
    assert response.json() == [
        {"name": "Back Room", "event_count": 1, "upcoming_count": 1},
        {"name": "Main Hall", "event_count": 1, "upcoming_count": 1},
    ]


@pytest.mark.asyncio
async def test_list_rooms_requires_auth(client: AsyncClient):
    response = await client.get("/api/rooms")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_rename_room_only_touches_own_events(
    client: AsyncClient, auth_headers, other_headers, test_event, past_event
):
    response = await client.post(
        "/api/rooms",
        json={"old_name": "Main Hall", "new_name": "Grand Hall"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"name": "Grand Hall", "event_count": 1}

    mine = (await client.get("/api/rooms", headers=auth_headers)).json()
    assert [r["name"] for r in mine] == ["Grand Hall"]

    theirs = (await client.get("/api/rooms", headers=other_headers)).json()
    assert [r["name"] for r in theirs] == ["Main Hall"]


@pytest.mark.asyncio
async def test_rename_unknown_room(client: AsyncClient, auth_headers, test_event):
    response = await client.post(
        "/api/rooms",
        json={"old_name": "Nowhere", "new_name": "Somewhere"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Room not found"}


@pytest.mark.asyncio
async def test_delete_room_removes_events_and_bookings(
    client: AsyncClient, auth_headers, other_headers, test_event, small_event, db_session
):
    event_id = test_event.id
    await client.post("/api/bookings", json={"event_id": event_id, "seats": 2}, headers=other_headers)

    response = await client.delete("/api/rooms/Main Hall", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["deleted_events"] == 1

    rooms = (await client.get("/api/rooms", headers=auth_headers)).json()
    assert [r["name"] for r in rooms] == ["Back Room"]

    orphans = (
        await db_session.execute(select(func.count(Booking.id)).where(Booking.event_id == event_id))
    ).scalar_one()
    assert orphans == 0


@pytest.mark.asyncio
async def test_delete_someone_elses_room(client: AsyncClient, other_headers, test_event):
    response = await client.delete("/api/rooms/Main Hall", headers=other_headers)
    assert response.status_code == 404
