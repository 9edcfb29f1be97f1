"""Billing business logic layer."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

import httpx

from app.core.config import Settings, get_settings
from app.core.enums import SessionTypeEnum
from app.modules.billing.models import Payment
from app.modules.billing.repository import BillingRepository
from app.modules.mentors.repository import MentorsRepository

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def session_price(hourly_rate: Decimal, session_type: SessionTypeEnum) -> Decimal:
    """Price of a session at the given hourly rate, rounded to cents."""
    minutes = Decimal(session_type.duration_minutes)
    return (hourly_rate * minutes / Decimal(60)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def build_payment_url(checkout_url: str, order_id: str) -> str:
    return str(httpx.URL(checkout_url).copy_add_param("order_id", order_id))


class BillingService:
    """Opens provider checkout orders for new bookings."""

    def __init__(
        self,
        repository: BillingRepository,
        mentors_repository: MentorsRepository,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository
        self.mentors_repository = mentors_repository
        self.settings = settings or get_settings()

    async def initiate_payment(
        self,
        booking_id: int,
        mentor_id: int,
        session_type: SessionTypeEnum,
    ) -> Payment | None:
        """Create a pending payment order, or None when no provider is configured."""
        checkout_url = self.settings.payment_checkout_url
        if not checkout_url:
            return None

        profile = await self.mentors_repository.get_profile_by_user_id(mentor_id)
        hourly_rate = self.settings.default_hourly_rate
        if profile is not None and profile.hourly_rate is not None:
            hourly_rate = profile.hourly_rate

        order_id = f"order_{uuid4().hex[:24]}"
        payment = await self.repository.create_payment(
            booking_id=booking_id,
            order_id=order_id,
            payment_url=build_payment_url(checkout_url, order_id),
            amount=session_price(hourly_rate, session_type),
            currency=self.settings.payment_currency,
        )
        logger.info("Opened payment order %s for booking %s", order_id, booking_id)
        return payment
