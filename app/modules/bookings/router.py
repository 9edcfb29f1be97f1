"""Booking API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.modules.billing.schemas import PaymentRead
from app.modules.bookings.schemas import BookingCreate, BookingCreated, BookingRead
from app.modules.bookings.service import BookingsService, get_bookings_service
from app.modules.identity.service import get_current_user
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    service: BookingsService = Depends(get_bookings_service),
) -> BookingCreated:
    """Create booking for an open slot."""
    booking, payment = await service.create_booking(payload)
    return BookingCreated(
        booking=BookingRead.model_validate(booking),
        payment=PaymentRead.model_validate(payment) if payment is not None else None,
    )


@router.get("/my", response_model=Page[BookingRead])
async def list_my_bookings(
    pagination=Depends(get_pagination_params),
    service: BookingsService = Depends(get_bookings_service),
    current_user=Depends(get_current_user),
) -> Page[BookingRead]:
    """List bookings for current user."""
    items, total = await service.list_bookings(current_user, pagination.limit, pagination.offset)
    serialized = [BookingRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
