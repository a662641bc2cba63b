"""
Locust load tests for seat accounting under contention.

Run scenarios:
  locust -f locustfile.py --tags contention   # many users, one small event
  locust -f locustfile.py --tags churn        # book / resize / cancel loops
  locust -f locustfile.py --tags edge         # bad input
  locust -f locustfile.py                     # all of the above

After a contention run, check in the database:
  SELECT available_seats FROM events WHERE id = X;   -- never negative
  SELECT COALESCE(SUM(seats), 0) FROM bookings WHERE event_id = X;
The two must add up to the seats the event was created with.
"""

import random
import uuid
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag, events

CONTENTION_SEATS = 10
CONTENTION_EVENT_ID = None


def _register_and_login(client) -> dict:
    email = f"load_{uuid.uuid4().hex[:10]}@test.com"
    client.post("/api/register", json={"name": "Load User", "email": email, "password": "test123"})
    resp = client.post("/api/login", json={"email": email, "password": "test123"})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def _create_event(client, headers: dict, seats: int, title: str):
    future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
    resp = client.post(
        "/api/events",
        json={
            "title": title,
            "description": "load test",
            "date": future,
            "location": "Load Hall",
            "available_seats": seats,
        },
        headers=headers,
    )
    return resp.json()["id"] if resp.status_code == 201 else None


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print(f"\nSeat contention target: {CONTENTION_SEATS} seats\n")


class ContentionUser(HttpUser):
    """Every user tries to take one seat of the same small event."""

    wait_time = between(0, 0.1)

    def on_start(self):
        global CONTENTION_EVENT_ID
        self.headers = _register_and_login(self.client)
        if self.headers and CONTENTION_EVENT_ID is None:
            CONTENTION_EVENT_ID = _create_event(
                self.client, self.headers, CONTENTION_SEATS, "Contention Event"
            )

    @tag("contention")
    @task
    def book_one_seat(self):
        if not CONTENTION_EVENT_ID or not self.headers:
            return

        with self.client.post(
            "/api/bookings",
            json={"event_id": CONTENTION_EVENT_ID, "seats": 1},
            headers=self.headers,
            catch_response=True,
            name="/api/bookings [contention]",
        ) as resp:
            # 400 covers both "already booked" and "sold out"
            if resp.status_code in (201, 400):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ChurnUser(HttpUser):
    """Books, resizes and cancels on a private event in a loop."""

    wait_time = between(0.05, 0.2)

    def on_start(self):
        self.headers = _register_and_login(self.client)
        self.event_id = _create_event(self.client, self.headers, 50, "Churn Event") if self.headers else None
        self.booking_id = None

    @tag("churn")
    @task(3)
    def book_or_resize(self):
        if not self.event_id:
            return
        seats = random.randint(1, 10)
        if self.booking_id is None:
            resp = self.client.post(
                "/api/bookings",
                json={"event_id": self.event_id, "seats": seats},
                headers=self.headers,
            )
            if resp.status_code == 201:
                self.booking_id = resp.json()["id"]
        else:
            self.client.put(
                f"/api/bookings/{self.booking_id}",
                json={"seats": seats},
                headers=self.headers,
                name="/api/bookings/[id]",
            )

    @tag("churn")
    @task(1)
    def cancel(self):
        if self.booking_id is None:
            return
        self.client.delete(
            f"/api/bookings/{self.booking_id}",
            headers=self.headers,
            name="/api/bookings/[id]",
        )
        self.booking_id = None

    @tag("churn")
    @task(2)
    def browse(self):
        self.client.get(f"/api/events?page={random.randint(1, 3)}&limit=20", name="/api/events")


class EdgeCaseUser(HttpUser):
    """Bad input must come back as 4xx, never 500."""

    wait_time = between(0.1, 0.3)

    def on_start(self):
        self.headers = _register_and_login(self.client)

    def _expect_client_error(self, method: str, url: str, **kwargs):
        with self.client.request(method, url, catch_response=True, **kwargs) as resp:
            if 400 <= resp.status_code < 500:
                resp.success()
            else:
                resp.failure(f"Expected 4xx, got {resp.status_code}")

    @tag("edge")
    @task
    def zero_seats(self):
        self._expect_client_error(
            "POST", "/api/bookings", json={"event_id": 1, "seats": 0}, headers=self.headers
        )

    @tag("edge")
    @task
    def missing_event(self):
        self._expect_client_error(
            "POST", "/api/bookings", json={"event_id": 999999, "seats": 1}, headers=self.headers
        )

    @tag("edge")
    @task
    def no_token(self):
        self._expect_client_error("GET", "/api/profile")

    @tag("edge")
    @task
    def bad_token(self):
        self._expect_client_error(
            "GET", "/api/dashboard", headers={"Authorization": "Bearer nope"}
        )
