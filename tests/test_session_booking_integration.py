"""HTTP integration tests for the profile and session booking flow."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

API_BASE_URL = os.getenv("INTEGRATION_BASE_URL", "http://localhost:8000/api/v1").rstrip("/")
HEALTHCHECK_URL = os.getenv("INTEGRATION_HEALTH_URL", "http://localhost:8000/health")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("INTEGRATION_TIMEOUT_SECONDS", "15"))
DEMO_PASSWORD = "IntegrationPass123!"


@dataclass(slots=True)
class AuthUser:
    id: int
    access_token: str


def _assert_status(response: httpx.Response, expected_status: int) -> None:
    assert response.status_code == expected_status, (
        f"{response.request.method} {response.request.url} -> "
        f"{response.status_code}, body={response.text}"
    )


def _auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


async def _register_and_login(client: httpx.AsyncClient, role: str) -> AuthUser:
    email = f"{role}-{uuid4().hex}@coachconnect.dev"
    register_response = await client.post(
        "/identity/auth/register",
        json={"name": f"Integration {role}", "email": email, "password": DEMO_PASSWORD, "role": role},
    )
    _assert_status(register_response, 201)

    login_response = await client.post(
        "/identity/auth/login",
        json={"email": email, "password": DEMO_PASSWORD},
    )
    _assert_status(login_response, 200)
    return AuthUser(id=register_response.json()["id"], access_token=login_response.json()["access_token"])


async def _publish_slot(client: httpx.AsyncClient, mentor: AuthUser, slot_date: date, start: str) -> dict:
    response = await client.post(
        "/slots",
        headers=_auth_headers(mentor.access_token),
        json={"date": slot_date.isoformat(), "start_time": start},
    )
    _assert_status(response, 201)
    return response.json()


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as probe:
        try:
            health_response = await probe.get(HEALTHCHECK_URL)
        except httpx.HTTPError as exc:
            pytest.skip(f"Integration stack unavailable at {HEALTHCHECK_URL}: {exc}")
            return
        if health_response.status_code != 200:
            pytest.skip(
                f"Integration stack returned {health_response.status_code} "
                f"for {HEALTHCHECK_URL}",
            )
            return

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT_SECONDS) as client:
        yield client


@pytest.mark.asyncio
async def test_mentor_profile_upsert_and_read(api_client: httpx.AsyncClient) -> None:
    mentor = await _register_and_login(api_client, role="mentor")

    created = await api_client.put(
        "/mentors/profile",
        json={"user_id": mentor.id, "category": "Career Development", "skills": ["Leadership"]},
    )
    _assert_status(created, 201)

    updated = await api_client.put("/mentors/profile", json={"user_id": mentor.id, "bio": "Updated"})
    _assert_status(updated, 200)
    assert updated.json()["id"] == created.json()["id"]

    profile = await api_client.get(f"/mentors/profile/{mentor.id}")
    _assert_status(profile, 200)
    body = profile.json()
    assert body["category"] == "Career Development"
    assert body["bio"] == "Updated"
    assert body["skills"] == '["Leadership"]'
    assert body["name"] == "Integration mentor"


@pytest.mark.asyncio
async def test_profile_write_for_non_mentor_is_forbidden(api_client: httpx.AsyncClient) -> None:
    user = await _register_and_login(api_client, role="user")

    response = await api_client.put("/mentors/profile", json={"user_id": user.id, "bio": "Nope"})

    _assert_status(response, 403)
    assert response.json()["error"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_booking_a_session_claims_the_matching_slot(api_client: httpx.AsyncClient) -> None:
    mentor = await _register_and_login(api_client, role="mentor")
    user = await _register_and_login(api_client, role="user")
    slot_date = date.today() + timedelta(days=3)
    slot = await _publish_slot(api_client, mentor, slot_date, "10:00:00")

    booked = await api_client.post(
        "/sessions/book",
        headers=_auth_headers(user.access_token),
        json={"mentor_id": mentor.id, "date": slot_date.isoformat(), "time": "10:00"},
    )
    _assert_status(booked, 201)
    result = booked.json()
    assert result["next_action"] in {"redirect_to_payment", "manual_payment"}

    open_slots = await api_client.get(
        "/slots",
        params={"mentor_id": mentor.id, "date": slot_date.isoformat(), "is_booked": 0, "is_active": 1},
    )
    _assert_status(open_slots, 200)
    assert slot["id"] not in {item["id"] for item in open_slots.json()}

    again = await api_client.post(
        "/sessions/book",
        headers=_auth_headers(user.access_token),
        json={"mentor_id": mentor.id, "date": slot_date.isoformat(), "time": "10:00"},
    )
    _assert_status(again, 409)
    assert again.json()["error"]["code"] == "slot_unavailable"


@pytest.mark.asyncio
async def test_booking_without_login_is_rejected(api_client: httpx.AsyncClient) -> None:
    response = await api_client.post(
        "/sessions/book",
        json={"mentor_id": 1, "date": date.today().isoformat(), "time": "10:00"},
    )

    _assert_status(response, 401)
    assert response.json()["error"]["code"] == "auth_required"
