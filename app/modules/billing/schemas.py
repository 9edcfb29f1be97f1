"""Billing schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.core.enums import PaymentStatusEnum


class PaymentRead(BaseModel):
    """Payment response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    order_id: str
    payment_url: str
    amount: Decimal
    currency: str
    status: PaymentStatusEnum
    paid_at: datetime | None
    created_at: datetime
