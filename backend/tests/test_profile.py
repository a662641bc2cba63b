"""
Tests for profile and dashboard endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_get_profile(client: AsyncClient, auth_headers, other_headers, test_event, small_event):
    await client.post("/api/bookings", json={"event_id": small_event.id, "seats": 2}, headers=auth_headers)

    response = await client.get("/api/profile", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["email"] == "test@example.com"
    assert data["user"]["name"] == "Test User"
    assert "hashed_password" not in data["user"]
    assert {e["id"] for e in data["events"]} == {test_event.id, small_event.id}
    assert len(data["bookings"]) == 1
    assert data["bookings"][0]["event_id"] == small_event.id
    assert data["bookings"][0]["seats"] == 2
    assert data["bookings"][0]["title"] == "Intimate Gig"

    other = (await client.get("/api/profile", headers=other_headers)).json()
    assert other["events"] == []
    assert other["bookings"] == []


@pytest.mark.asyncio
async def test_update_profile_name_and_email(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/profile",
        json={"name": "Renamed User", "email": "renamed@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed User"
    assert response.json()["email"] == "renamed@example.com"

    login = await client.post("/api/login", json={
        "email": "renamed@example.com",
        "password": "testpassword123",
    })
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_profile_password(client: AsyncClient, auth_headers):
    response = await client.put("/api/profile", json={"password": "brand-new-pass"}, headers=auth_headers)
    assert response.status_code == 200

    old = await client.post("/api/login", json={"email": "test@example.com", "password": "testpassword123"})
    new = await client.post("/api/login", json={"email": "test@example.com", "password": "brand-new-pass"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_profile_duplicate_email(client: AsyncClient, auth_headers, other_user):
    response = await client.put("/api/profile", json={"email": "other@example.com"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}


@pytest.mark.asyncio
async def test_update_profile_keeping_own_email(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/profile",
        json={"name": "Same Email", "email": "test@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_dashboard(client: AsyncClient, auth_headers, other_headers, test_event, small_event, past_event):
    await client.post("/api/bookings", json={"event_id": past_event.id, "seats": 1}, headers=auth_headers)
    await client.post("/api/bookings", json={"event_id": small_event.id, "seats": 2}, headers=auth_headers)

    response = await client.get("/api/dashboard", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()

    assert data["stats"] == {"events_created": 2, "bookings_made": 2, "seats_booked": 3}

    # Past event is excluded; soonest first
    upcoming = data["upcoming_events"]
    assert [e["id"] for e in upcoming] == [small_event.id, test_event.id]
    assert all(e["relation"] == "created" for e in upcoming)

    assert len(data["recent_bookings"]) == 2

    locations = {t["location"]: t for t in data["locations"]}
    assert locations["Main Hall"] == {"location": "Main Hall", "event_count": 2, "upcoming_count": 1}
    assert locations["Back Room"] == {"location": "Back Room", "event_count": 1, "upcoming_count": 1}

    other = (await client.get("/api/dashboard", headers=other_headers)).json()
    assert other["stats"]["events_created"] == 1
    assert other["upcoming_events"] == []


@pytest.mark.asyncio
async def test_dashboard_marks_booked_events(client: AsyncClient, other_headers, test_event):
    await client.post("/api/bookings", json={"event_id": test_event.id, "seats": 1}, headers=other_headers)

    data = (await client.get("/api/dashboard", headers=other_headers)).json()
    assert data["upcoming_events"][0]["id"] == test_event.id
    assert data["upcoming_events"][0]["relation"] == "booked"
