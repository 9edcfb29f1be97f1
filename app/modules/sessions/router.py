"""Session booking API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from app.modules.identity.service import get_current_user, get_optional_user
from app.modules.sessions.schemas import PendingBookingMarker, SessionBookingRequest, SessionBookingResult
from app.modules.sessions.service import SessionBookingService, get_session_booking_service
from app.shared.exceptions import NotFoundException

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/book", response_model=SessionBookingResult, status_code=status.HTTP_201_CREATED)
async def book_session(
    payload: SessionBookingRequest,
    service: SessionBookingService = Depends(get_session_booking_service),
    current_user=Depends(get_optional_user),
) -> SessionBookingResult:
    """Book a session with a coach and tell the client where to go next."""
    user_id = current_user.id if current_user is not None else None
    return await service.book_session(user_id, payload)


@router.get("/pending", response_model=PendingBookingMarker, response_model_by_alias=True)
async def get_pending_booking(
    service: SessionBookingService = Depends(get_session_booking_service),
    current_user=Depends(get_current_user),
) -> PendingBookingMarker:
    """Read back the pending-booking marker after returning from payment."""
    marker = await service.get_pending_marker(current_user.id)
    if marker is None:
        raise NotFoundException("No pending booking")
    return marker


@router.delete("/pending", status_code=status.HTTP_204_NO_CONTENT)
async def clear_pending_booking(
    service: SessionBookingService = Depends(get_session_booking_service),
    current_user=Depends(get_current_user),
) -> Response:
    """Drop the pending-booking marker."""
    await service.clear_pending_marker(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
