"""Billing repository layer."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PaymentStatusEnum
from app.modules.billing.models import Payment


class BillingRepository:
    """DB access methods for billing."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_payment(
        self,
        booking_id: int,
        order_id: str,
        payment_url: str,
        amount: Decimal,
        currency: str,
    ) -> Payment:
        payment = Payment(
            booking_id=booking_id,
            order_id=order_id,
            payment_url=payment_url,
            amount=amount,
            currency=currency.upper(),
            status=PaymentStatusEnum.PENDING,
        )
        self.session.add(payment)
        await self.session.flush()
        return payment
