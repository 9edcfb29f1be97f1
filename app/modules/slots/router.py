"""Slot API router."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.modules.identity.service import get_current_user
from app.modules.slots.schemas import SlotCreate, SlotRead
from app.modules.slots.service import SlotsService, get_slots_service

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=list[SlotRead])
async def list_slots(
    mentor_id: int | None = Query(default=None),
    slot_date: date | None = Query(default=None, alias="date"),
    is_booked: bool | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    service: SlotsService = Depends(get_slots_service),
) -> list[SlotRead]:
    """List slots, e.g. a mentor's open slots on a given date."""
    slots = await service.list_slots(mentor_id, slot_date, is_booked, is_active)
    return [SlotRead.model_validate(slot) for slot in slots]


@router.post("", response_model=SlotRead, status_code=status.HTTP_201_CREATED)
async def create_slot(
    payload: SlotCreate,
    service: SlotsService = Depends(get_slots_service),
    current_user=Depends(get_current_user),
) -> SlotRead:
    """Publish a slot."""
    slot = await service.create_slot(payload, current_user)
    return SlotRead.model_validate(slot)
