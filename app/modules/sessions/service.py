"""Session booking orchestration."""

from __future__ import annotations

import logging

import httpx
from fastapi import Depends
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_db_session
from app.core.enums import NextActionEnum
from app.core.metrics import record_session_booking
from app.modules.bookings.schemas import BookingCreate
from app.modules.bookings.service import build_bookings_service
from app.modules.sessions.gateways import (
    BookingGateway,
    DatabaseBookingGateway,
    DatabaseSlotGateway,
    HttpMarketplaceGateway,
    SlotGateway,
)
from app.modules.sessions.markers import PendingBookingStore, get_pending_booking_store
from app.modules.sessions.schemas import (
    PendingBookingMarker,
    SessionBookingRequest,
    SessionBookingResult,
    SlotOption,
)
from app.modules.slots.repository import SlotsRepository
from app.shared.exceptions import (
    AuthRequiredException,
    SlotUnavailableException,
    TransportException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def match_slot(slots: list[SlotOption], requested_time: str) -> SlotOption | None:
    """Return the first slot whose HH:MM start equals the requested time."""
    for slot in slots:
        if slot.start_time[:5] == requested_time:
            return slot
    return None


class SessionBookingService:
    """Books a coaching session: find the slot, create the booking, route to payment."""

    def __init__(
        self,
        slot_gateway: SlotGateway,
        booking_gateway: BookingGateway,
        marker_store: PendingBookingStore,
        settings: Settings | None = None,
    ) -> None:
        self.slot_gateway = slot_gateway
        self.booking_gateway = booking_gateway
        self.marker_store = marker_store
        self.settings = settings or get_settings()

    async def book_session(self, user_id: int | None, request: SessionBookingRequest) -> SessionBookingResult:
        """Book the slot matching the requested date and time."""
        if user_id is None:
            raise AuthRequiredException("Please login first")
        if request.date is None or not request.time:
            raise ValidationException("Please select both date and time")

        try:
            slots = await self.slot_gateway.list_open_slots(request.mentor_id, request.date)
            slot = match_slot(slots, request.time)
            if slot is None:
                raise SlotUnavailableException(
                    "Selected slot is no longer available. Please choose another time.",
                )

            confirmation = await self.booking_gateway.create_booking(
                BookingCreate(
                    user_id=user_id,
                    mentor_id=request.mentor_id,
                    slot_id=slot.id,
                    notes=f"Session type: {request.session_type}",
                    session_type=request.session_type,
                ),
            )
        except SlotUnavailableException:
            record_session_booking("slot_unavailable")
            raise
        except TransportException:
            record_session_booking("transport_error")
            raise

        payment = confirmation.payment
        if payment is not None and payment.payment_url:
            try:
                await self.marker_store.save(
                    user_id,
                    PendingBookingMarker(booking_id=confirmation.booking_id, order_id=payment.order_id),
                )
            except (RedisError, OSError) as exc:
                record_session_booking("transport_error")
                logger.exception(
                    "Booking %s for user %s created but its pending marker was not saved",
                    confirmation.booking_id,
                    user_id,
                )
                raise TransportException("Failed to save pending booking") from exc
            record_session_booking(NextActionEnum.REDIRECT_TO_PAYMENT)
            logger.info(
                "Booking %s for user %s awaits payment order %s",
                confirmation.booking_id,
                user_id,
                payment.order_id,
            )
            return SessionBookingResult(
                booking_id=confirmation.booking_id,
                next_action=NextActionEnum.REDIRECT_TO_PAYMENT,
                redirect_url=payment.payment_url,
                order_id=payment.order_id,
                message="Booking created! Redirecting to payment...",
            )

        record_session_booking(NextActionEnum.MANUAL_PAYMENT)
        logger.info("Booking %s for user %s needs manual payment", confirmation.booking_id, user_id)
        redirect_url = str(
            httpx.URL(self.settings.manual_payment_path).copy_add_param("bookingId", confirmation.booking_id),
        )
        return SessionBookingResult(
            booking_id=confirmation.booking_id,
            next_action=NextActionEnum.MANUAL_PAYMENT,
            redirect_url=redirect_url,
            message="Booking created! Please complete payment.",
        )

    async def get_pending_marker(self, user_id: int) -> PendingBookingMarker | None:
        """Return the caller's pending-booking marker, if any."""
        return await self.marker_store.load(user_id)

    async def clear_pending_marker(self, user_id: int) -> None:
        """Forget the caller's pending-booking marker."""
        await self.marker_store.clear(user_id)


async def get_session_booking_service(
    session: AsyncSession = Depends(get_db_session),
    marker_store: PendingBookingStore = Depends(get_pending_booking_store),
) -> SessionBookingService:
    """Dependency provider wiring the configured collaborator backend."""
    settings = get_settings()
    if settings.booking_gateway_backend == "http":
        gateway = HttpMarketplaceGateway(
            base_url=settings.marketplace_api_url or "",
            timeout_seconds=settings.marketplace_timeout_seconds,
        )
        return SessionBookingService(gateway, gateway, marker_store, settings)

    return SessionBookingService(
        slot_gateway=DatabaseSlotGateway(SlotsRepository(session)),
        booking_gateway=DatabaseBookingGateway(build_bookings_service(session), session),
        marker_store=marker_store,
        settings=settings,
    )
