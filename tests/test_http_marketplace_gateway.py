from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from app.core.enums import SessionTypeEnum
from app.modules.bookings.schemas import BookingCreate
from app.modules.sessions.gateways import HttpMarketplaceGateway
from app.shared.exceptions import SlotUnavailableException, TransportException


def make_gateway(handler) -> HttpMarketplaceGateway:
    return HttpMarketplaceGateway(
        base_url="http://marketplace.test/api/v1/",
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


def make_booking() -> BookingCreate:
    return BookingCreate(
        user_id=11,
        mentor_id=3,
        slot_id=42,
        notes="Session type: quick",
        session_type=SessionTypeEnum.QUICK,
    )


@pytest.mark.asyncio
async def test_slot_query_sends_availability_filters() -> None:
    captured: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json=[{"id": 42, "start_time": "10:00:00", "is_booked": False}])

    slots = await make_gateway(handler).list_open_slots(3, date(2024, 6, 1))

    request = captured["request"]
    assert request.url.path == "/api/v1/slots"
    assert dict(request.url.params) == {
        "mentor_id": "3",
        "date": "2024-06-01",
        "is_booked": "0",
        "is_active": "1",
    }
    assert [(slot.id, slot.start_time) for slot in slots] == [(42, "10:00:00")]


@pytest.mark.asyncio
async def test_booking_creation_returns_payment_link() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            201,
            json={
                "booking": {"id": 501, "slot_id": 42},
                "payment": {"order_id": "order_abc", "payment_url": "https://pay.example.com/c"},
            },
        )

    confirmation = await make_gateway(handler).create_booking(make_booking())

    assert captured["path"] == "/api/v1/bookings"
    assert captured["body"] == {
        "user_id": 11,
        "mentor_id": 3,
        "slot_id": 42,
        "notes": "Session type: quick",
        "session_type": "quick",
    }
    assert confirmation.booking_id == 501
    assert confirmation.payment is not None
    assert confirmation.payment.order_id == "order_abc"
    assert confirmation.payment.payment_url == "https://pay.example.com/c"


@pytest.mark.asyncio
async def test_booking_creation_without_payment() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"booking": {"id": 502}, "payment": None})

    confirmation = await make_gateway(handler).create_booking(make_booking())

    assert confirmation.booking_id == 502
    assert confirmation.payment is None


@pytest.mark.asyncio
async def test_booking_conflict_maps_to_slot_unavailable() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={"error": {"code": "slot_unavailable", "message": "Slot is no longer available"}},
        )

    with pytest.raises(SlotUnavailableException) as exc:
        await make_gateway(handler).create_booking(make_booking())
    assert exc.value.message == "Slot is no longer available"


@pytest.mark.asyncio
async def test_booking_server_error_carries_remote_message() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Database error"})

    with pytest.raises(TransportException) as exc:
        await make_gateway(handler).create_booking(make_booking())
    assert exc.value.message == "Database error"


@pytest.mark.asyncio
async def test_network_failure_maps_to_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportException) as exc:
        await make_gateway(handler).list_open_slots(3, date(2024, 6, 1))
    assert exc.value.message == "Failed to fetch available slots"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>proxy</html>"),
        httpx.Response(200, json={"slots": []}),
        httpx.Response(200, json=[{"id": 42}]),
        httpx.Response(200, json=[{"id": "not-a-number", "start_time": "10:00:00"}]),
    ],
)
async def test_unreadable_slot_list_maps_to_transport_error(response: httpx.Response) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(TransportException) as exc:
        await make_gateway(handler).list_open_slots(3, date(2024, 6, 1))
    assert exc.value.message == "Failed to fetch available slots"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(201, text="<html>proxy</html>"),
        httpx.Response(201, json=[]),
        httpx.Response(201, json={"payment": None}),
        httpx.Response(201, json={"booking": {"id": 501}, "payment": {"payment_url": "https://pay.example.com/c"}}),
        httpx.Response(201, json={"booking": {"id": 501}, "payment": "order_abc"}),
    ],
)
async def test_unreadable_booking_reply_maps_to_transport_error(response: httpx.Response) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(TransportException) as exc:
        await make_gateway(handler).create_booking(make_booking())
    assert exc.value.message == "Failed to create booking"
