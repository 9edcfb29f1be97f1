"""Slot lookup and booking creation collaborators of the session orchestrator."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Protocol

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bookings.schemas import BookingCreate
from app.modules.bookings.service import BookingsService
from app.modules.sessions.schemas import BookingConfirmation, PaymentLink, SlotOption
from app.modules.slots.repository import SlotsRepository
from app.shared.exceptions import SlotUnavailableException, TransportException
from app.shared.utils import format_clock

logger = logging.getLogger(__name__)


class SlotGateway(Protocol):
    """Answers availability queries for a mentor."""

    async def list_open_slots(self, mentor_id: int, slot_date: date) -> list[SlotOption]:
        """Return unbooked, active slots of the mentor on the date."""


class BookingGateway(Protocol):
    """Creates bookings."""

    async def create_booking(self, payload: BookingCreate) -> BookingConfirmation:
        """Create booking and return its id with the optional payment order."""


class DatabaseSlotGateway:
    """Reads slots from the local database."""

    def __init__(self, repository: SlotsRepository) -> None:
        self.repository = repository

    async def list_open_slots(self, mentor_id: int, slot_date: date) -> list[SlotOption]:
        try:
            slots = await self.repository.list_slots(
                mentor_id=mentor_id,
                slot_date=slot_date,
                is_booked=False,
                is_active=True,
            )
        except SQLAlchemyError as exc:
            logger.exception("Slot lookup failed for mentor %s", mentor_id)
            raise TransportException("Failed to fetch available slots") from exc
        return [SlotOption(id=slot.id, start_time=format_clock(slot.start_time)) for slot in slots]


class DatabaseBookingGateway:
    """Creates bookings in-process and commits them before the caller moves on."""

    def __init__(self, service: BookingsService, session: AsyncSession) -> None:
        self.service = service
        self.session = session

    async def create_booking(self, payload: BookingCreate) -> BookingConfirmation:
        try:
            booking, payment = await self.service.create_booking(payload)
            # The pending-booking marker must only ever name a committed booking.
            await self.session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Booking creation failed for slot %s", payload.slot_id)
            raise TransportException("Failed to create booking") from exc

        link = None
        if payment is not None:
            link = PaymentLink(order_id=payment.order_id, payment_url=payment.payment_url)
        return BookingConfirmation(booking_id=booking.id, payment=link)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return default


class HttpMarketplaceGateway:
    """Talks to a remote marketplace API over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    async def list_open_slots(self, mentor_id: int, slot_date: date) -> list[SlotOption]:
        params = {
            "mentor_id": mentor_id,
            "date": slot_date.isoformat(),
            "is_booked": 0,
            "is_active": 1,
        }
        try:
            async with self._client() as client:
                response = await client.get("/slots", params=params)
        except httpx.HTTPError as exc:
            logger.warning("Slot lookup request failed: %s", exc)
            raise TransportException("Failed to fetch available slots") from exc

        if response.status_code != 200:
            raise TransportException(_error_message(response, "Failed to fetch available slots"))
        try:
            return [SlotOption(id=item["id"], start_time=item["start_time"]) for item in response.json()]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Unreadable slot list from marketplace: %s", exc)
            raise TransportException("Failed to fetch available slots") from exc

    async def create_booking(self, payload: BookingCreate) -> BookingConfirmation:
        try:
            async with self._client() as client:
                response = await client.post("/bookings", json=payload.model_dump(mode="json"))
        except httpx.HTTPError as exc:
            logger.warning("Booking request failed: %s", exc)
            raise TransportException("Failed to create booking") from exc

        if response.status_code == 409:
            raise SlotUnavailableException(_error_message(response, "Slot is no longer available"))
        if not response.is_success:
            raise TransportException(_error_message(response, "Failed to create booking"))

        try:
            body = response.json()
            payment = body.get("payment")
            link = None
            if payment:
                link = PaymentLink(order_id=payment["order_id"], payment_url=payment.get("payment_url"))
            return BookingConfirmation(booking_id=body["booking"]["id"], payment=link)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Unreadable booking reply from marketplace: %s", exc)
            raise TransportException("Failed to create booking") from exc
