"""Booking business logic layer."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.billing.models import Payment
from app.modules.billing.repository import BillingRepository
from app.modules.billing.service import BillingService
from app.modules.bookings.models import Booking
from app.modules.bookings.repository import BookingsRepository
from app.modules.bookings.schemas import BookingCreate
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.mentors.repository import MentorsRepository
from app.modules.slots.repository import SlotsRepository
from app.shared.exceptions import NotFoundException, SlotUnavailableException

logger = logging.getLogger(__name__)


class BookingsService:
    """Creates bookings against open slots and opens their payment orders."""

    def __init__(
        self,
        booking_repository: BookingsRepository,
        slots_repository: SlotsRepository,
        identity_repository: IdentityRepository,
        billing_service: BillingService,
    ) -> None:
        self.booking_repository = booking_repository
        self.slots_repository = slots_repository
        self.identity_repository = identity_repository
        self.billing_service = billing_service

    async def create_booking(self, payload: BookingCreate) -> tuple[Booking, Payment | None]:
        """Book the slot for the user and initiate payment when a provider is set up."""
        user = await self.identity_repository.get_user_by_id(payload.user_id)
        if user is None:
            raise NotFoundException("User not found")

        slot = await self.slots_repository.get_slot_for_update(payload.slot_id)
        if slot is None:
            raise SlotUnavailableException("Slot not found")
        if slot.mentor_id != payload.mentor_id:
            raise SlotUnavailableException("Slot does not belong to this mentor")
        if slot.is_booked or not slot.is_active:
            raise SlotUnavailableException("Slot is no longer available")

        try:
            booking = await self.booking_repository.create_booking(
                user_id=payload.user_id,
                mentor_id=payload.mentor_id,
                slot_id=slot.id,
                notes=payload.notes,
                session_type=payload.session_type,
            )
        except IntegrityError as exc:
            logger.info("Slot %s was claimed concurrently", slot.id)
            raise SlotUnavailableException("Slot is no longer available") from exc

        await self.slots_repository.mark_booked(slot)
        payment = await self.billing_service.initiate_payment(
            booking_id=booking.id,
            mentor_id=payload.mentor_id,
            session_type=payload.session_type,
        )
        logger.info(
            "Booking %s created: user=%s mentor=%s slot=%s",
            booking.id,
            payload.user_id,
            payload.mentor_id,
            slot.id,
        )
        return booking, payment

    async def list_bookings(self, actor: User, limit: int, offset: int) -> tuple[list[Booking], int]:
        """List bookings made by the actor."""
        return await self.booking_repository.list_bookings_for_user(actor.id, limit, offset)


def build_bookings_service(session: AsyncSession) -> BookingsService:
    return BookingsService(
        booking_repository=BookingsRepository(session),
        slots_repository=SlotsRepository(session),
        identity_repository=IdentityRepository(session),
        billing_service=BillingService(BillingRepository(session), MentorsRepository(session)),
    )


async def get_bookings_service(session: AsyncSession = Depends(get_db_session)) -> BookingsService:
    """Dependency provider for bookings service."""
    return build_bookings_service(session)
