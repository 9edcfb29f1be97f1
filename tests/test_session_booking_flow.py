from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from prometheus_client import REGISTRY
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.cache import InMemoryCacheBackend
from app.core.enums import NextActionEnum, SessionTypeEnum
from app.modules.bookings.schemas import BookingCreate
from app.modules.sessions.markers import PendingBookingStore
from app.modules.sessions.schemas import (
    BookingConfirmation,
    PaymentLink,
    PendingBookingMarker,
    SessionBookingRequest,
    SlotOption,
)
from app.modules.sessions.service import SessionBookingService, match_slot
from app.shared.exceptions import (
    AuthRequiredException,
    SlotUnavailableException,
    TransportException,
    ValidationException,
)


class FakeSlotGateway:
    def __init__(self, slots: list[SlotOption], events: list[str], error: Exception | None = None) -> None:
        self.slots = slots
        self.events = events
        self.error = error
        self.queries: list[tuple[int, date]] = []

    async def list_open_slots(self, mentor_id: int, slot_date: date) -> list[SlotOption]:
        self.events.append("list_open_slots")
        self.queries.append((mentor_id, slot_date))
        if self.error is not None:
            raise self.error
        return self.slots


class FakeBookingGateway:
    def __init__(self, confirmation: BookingConfirmation, events: list[str]) -> None:
        self.confirmation = confirmation
        self.events = events
        self.calls: list[BookingCreate] = []

    async def create_booking(self, payload: BookingCreate) -> BookingConfirmation:
        self.events.append("create_booking")
        self.calls.append(payload)
        return self.confirmation


class RecordingMarkerStore(PendingBookingStore):
    def __init__(self, events: list[str]) -> None:
        super().__init__(InMemoryCacheBackend(), key_name="pendingBooking", ttl_seconds=3600)
        self.events = events

    async def save(self, user_id: int, marker: PendingBookingMarker) -> None:
        self.events.append("save_marker")
        await super().save(user_id, marker)


def make_service(
    *,
    slots: list[SlotOption],
    confirmation: BookingConfirmation | None = None,
    slot_error: Exception | None = None,
) -> tuple[SessionBookingService, FakeSlotGateway, FakeBookingGateway, RecordingMarkerStore, list[str]]:
    events: list[str] = []
    slot_gateway = FakeSlotGateway(slots, events, error=slot_error)
    booking_gateway = FakeBookingGateway(confirmation or BookingConfirmation(booking_id=501), events)
    marker_store = RecordingMarkerStore(events)
    settings = SimpleNamespace(manual_payment_path="/dashboard/userdashboard/userpayment")
    service = SessionBookingService(slot_gateway, booking_gateway, marker_store, settings=settings)
    return service, slot_gateway, booking_gateway, marker_store, events


def make_request(**overrides) -> SessionBookingRequest:
    values = {"mentor_id": 3, "date": "2024-06-01", "time": "10:00", "session_type": "standard"}
    values.update(overrides)
    return SessionBookingRequest(**values)


@pytest.mark.asyncio
async def test_matching_slot_is_booked_by_id() -> None:
    service, slot_gateway, booking_gateway, _, _ = make_service(
        slots=[SlotOption(id=41, start_time="09:00:00"), SlotOption(id=42, start_time="10:00:00")],
    )

    await service.book_session(11, make_request())

    assert slot_gateway.queries == [(3, date(2024, 6, 1))]
    assert len(booking_gateway.calls) == 1
    created = booking_gateway.calls[0]
    assert created.slot_id == 42
    assert created.user_id == 11
    assert created.mentor_id == 3
    assert created.notes == "Session type: standard"
    assert created.session_type == SessionTypeEnum.STANDARD


@pytest.mark.asyncio
async def test_no_matching_slot_raises_and_skips_booking_creation() -> None:
    service, _, booking_gateway, _, _ = make_service(
        slots=[SlotOption(id=43, start_time="11:00:00"), SlotOption(id=44, start_time="10:30:00")],
    )

    with pytest.raises(SlotUnavailableException) as exc:
        await service.book_session(11, make_request())

    assert "choose another time" in exc.value.message
    assert booking_gateway.calls == []


@pytest.mark.asyncio
async def test_missing_identity_requires_login() -> None:
    service, slot_gateway, booking_gateway, _, _ = make_service(slots=[])

    with pytest.raises(AuthRequiredException):
        await service.book_session(None, make_request())

    assert slot_gateway.queries == []
    assert booking_gateway.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"date": ""}, {"time": ""}, {"date": None, "time": None}])
async def test_date_and_time_are_both_required(overrides: dict) -> None:
    service, slot_gateway, _, _, _ = make_service(slots=[SlotOption(id=42, start_time="10:00:00")])

    with pytest.raises(ValidationException):
        await service.book_session(11, make_request(**overrides))

    assert slot_gateway.queries == []


@pytest.mark.asyncio
async def test_payment_url_persists_marker_before_redirect() -> None:
    confirmation = BookingConfirmation(
        booking_id=501,
        payment=PaymentLink(order_id="order_abc", payment_url="https://pay.example.com/checkout?order_id=order_abc"),
    )
    service, _, _, marker_store, events = make_service(
        slots=[SlotOption(id=42, start_time="10:00:00")],
        confirmation=confirmation,
    )

    result = await service.book_session(11, make_request())

    assert events == ["list_open_slots", "create_booking", "save_marker"]
    assert result.next_action == NextActionEnum.REDIRECT_TO_PAYMENT
    assert result.redirect_url == "https://pay.example.com/checkout?order_id=order_abc"
    assert result.order_id == "order_abc"
    marker = await marker_store.load(11)
    assert marker == PendingBookingMarker(booking_id=501, order_id="order_abc")
    assert marker.model_dump(by_alias=True) == {"bookingId": 501, "orderId": "order_abc"}


@pytest.mark.asyncio
async def test_missing_payment_routes_to_manual_payment_view() -> None:
    service, _, _, marker_store, events = make_service(
        slots=[SlotOption(id=42, start_time="10:00:00")],
        confirmation=BookingConfirmation(booking_id=502),
    )

    result = await service.book_session(11, make_request())

    assert result.next_action == NextActionEnum.MANUAL_PAYMENT
    assert result.booking_id == 502
    assert result.redirect_url == "/dashboard/userdashboard/userpayment?bookingId=502"
    assert "save_marker" not in events
    assert await marker_store.load(11) is None


@pytest.mark.asyncio
async def test_payment_without_url_routes_to_manual_payment_view() -> None:
    service, _, _, _, events = make_service(
        slots=[SlotOption(id=42, start_time="10:00:00")],
        confirmation=BookingConfirmation(booking_id=503, payment=PaymentLink(order_id="order_x")),
    )

    result = await service.book_session(11, make_request())

    assert result.next_action == NextActionEnum.MANUAL_PAYMENT
    assert "save_marker" not in events


@pytest.mark.asyncio
async def test_slot_lookup_transport_failure_surfaces_and_skips_booking() -> None:
    service, _, booking_gateway, _, _ = make_service(
        slots=[],
        slot_error=TransportException("Failed to fetch available slots"),
    )

    with pytest.raises(TransportException) as exc:
        await service.book_session(11, make_request())

    assert exc.value.message == "Failed to fetch available slots"
    assert booking_gateway.calls == []


def test_match_slot_truncates_stored_time_to_hour_minute() -> None:
    slots = [SlotOption(id=1, start_time="10:00:59"), SlotOption(id=2, start_time="10:00:00")]

    assert match_slot(slots, "10:00").id == 1
    assert match_slot(slots, "10:00:00") is None
    assert match_slot(slots, "10:0") is None


class UnreachableCache:
    async def get(self, key: str) -> str | None:
        raise RedisConnectionError("connection refused")

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        raise RedisConnectionError("connection refused")

    async def delete(self, key: str) -> None:
        raise RedisConnectionError("connection refused")


@pytest.mark.asyncio
async def test_unreachable_marker_store_surfaces_as_transport_error() -> None:
    events: list[str] = []
    confirmation = BookingConfirmation(
        booking_id=501,
        payment=PaymentLink(order_id="order_abc", payment_url="https://pay.example.com/checkout?order_id=order_abc"),
    )
    service = SessionBookingService(
        FakeSlotGateway([SlotOption(id=42, start_time="10:00:00")], events),
        FakeBookingGateway(confirmation, events),
        PendingBookingStore(UnreachableCache(), key_name="pendingBooking", ttl_seconds=3600),
        settings=SimpleNamespace(manual_payment_path="/dashboard/userdashboard/userpayment"),
    )
    before = REGISTRY.get_sample_value("coachconnect_session_bookings_total", {"outcome": "transport_error"}) or 0.0

    with pytest.raises(TransportException) as exc:
        await service.book_session(11, make_request())

    assert exc.value.message == "Failed to save pending booking"
    assert events == ["list_open_slots", "create_booking"]
    after = REGISTRY.get_sample_value("coachconnect_session_bookings_total", {"outcome": "transport_error"})
    assert after == before + 1
