"""Booking schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import SessionTypeEnum
from app.modules.billing.schemas import PaymentRead


class BookingCreate(BaseModel):
    """Create booking request."""

    user_id: int
    mentor_id: int
    slot_id: int
    notes: str = Field(default="", max_length=2000)
    session_type: SessionTypeEnum = SessionTypeEnum.STANDARD


class BookingRead(BaseModel):
    """Booking response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    mentor_id: int
    slot_id: int
    notes: str
    session_type: SessionTypeEnum
    created_at: datetime
    updated_at: datetime


class BookingCreated(BaseModel):
    """Booking plus the payment order opened for it, if any."""

    booking: BookingRead
    payment: PaymentRead | None = None
