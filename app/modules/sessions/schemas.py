"""Session booking schemas."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.enums import NextActionEnum, SessionTypeEnum


class SessionBookingRequest(BaseModel):
    """Coach, date, time and session type picked by the user."""

    mentor_id: int
    date: dt.date | None = None
    time: str | None = Field(default=None, max_length=8)
    session_type: SessionTypeEnum = SessionTypeEnum.STANDARD

    @field_validator("date", "time", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        """Unselected pickers arrive as empty strings."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SlotOption(BaseModel):
    """Open slot as seen by the orchestrator; start_time is HH:MM:SS."""

    id: int
    start_time: str


class PaymentLink(BaseModel):
    """Payment order returned with a new booking."""

    order_id: str
    payment_url: str | None = None


class BookingConfirmation(BaseModel):
    """Result of the booking-creation call."""

    booking_id: int
    payment: PaymentLink | None = None


class PendingBookingMarker(BaseModel):
    """Booking awaiting reconciliation after the payment redirect."""

    model_config = ConfigDict(populate_by_name=True)

    booking_id: int = Field(alias="bookingId")
    order_id: str = Field(alias="orderId")


class SessionBookingResult(BaseModel):
    """Where the client goes next after booking a session."""

    booking_id: int
    next_action: NextActionEnum
    redirect_url: str
    order_id: str | None = None
    message: str
