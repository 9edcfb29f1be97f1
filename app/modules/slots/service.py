"""Slot business logic layer."""

from __future__ import annotations

from datetime import date

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.modules.identity.models import User
from app.modules.slots.models import MentorSlot
from app.modules.slots.repository import SlotsRepository
from app.modules.slots.schemas import SlotCreate
from app.shared.exceptions import ForbiddenException, ValidationException


class SlotsService:
    """Slot domain service."""

    def __init__(self, repository: SlotsRepository) -> None:
        self.repository = repository

    async def create_slot(self, payload: SlotCreate, actor: User) -> MentorSlot:
        """Publish a slot for the calling mentor (admins may publish for any mentor)."""
        if actor.role.name == RoleEnum.MENTOR:
            mentor_id = payload.mentor_id or actor.id
            if mentor_id != actor.id:
                raise ForbiddenException("Mentors can only publish their own slots")
        elif actor.role.name == RoleEnum.ADMIN:
            if payload.mentor_id is None:
                raise ValidationException("mentor_id is required")
            mentor_id = payload.mentor_id
        else:
            raise ForbiddenException("Only mentors can publish slots")

        if payload.end_time is not None and payload.end_time <= payload.start_time:
            raise ValidationException("Slot end_time must be after start_time")

        return await self.repository.create_slot(
            mentor_id=mentor_id,
            slot_date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )

    async def list_slots(
        self,
        mentor_id: int | None,
        slot_date: date | None,
        is_booked: bool | None,
        is_active: bool | None,
    ) -> list[MentorSlot]:
        """List slots matching the given filters."""
        return await self.repository.list_slots(
            mentor_id=mentor_id,
            slot_date=slot_date,
            is_booked=is_booked,
            is_active=is_active,
        )


async def get_slots_service(session: AsyncSession = Depends(get_db_session)) -> SlotsService:
    """Dependency provider for slots service."""
    return SlotsService(SlotsRepository(session))
