"""Slot repository layer."""

from __future__ import annotations

from datetime import date, time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.slots.models import MentorSlot


class SlotsRepository:
    """DB access for mentor slots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_slot(
        self,
        mentor_id: int,
        slot_date: date,
        start_time: time,
        end_time: time | None,
    ) -> MentorSlot:
        slot = MentorSlot(
            mentor_id=mentor_id,
            date=slot_date,
            start_time=start_time,
            end_time=end_time,
            is_booked=False,
            is_active=True,
        )
        self.session.add(slot)
        await self.session.flush()
        return slot

    async def get_slot_for_update(self, slot_id: int) -> MentorSlot | None:
        stmt = select(MentorSlot).where(MentorSlot.id == slot_id).with_for_update()
        return await self.session.scalar(stmt)

    async def list_slots(
        self,
        mentor_id: int | None = None,
        slot_date: date | None = None,
        is_booked: bool | None = None,
        is_active: bool | None = None,
    ) -> list[MentorSlot]:
        stmt = select(MentorSlot)
        if mentor_id is not None:
            stmt = stmt.where(MentorSlot.mentor_id == mentor_id)
        if slot_date is not None:
            stmt = stmt.where(MentorSlot.date == slot_date)
        if is_booked is not None:
            stmt = stmt.where(MentorSlot.is_booked.is_(is_booked))
        if is_active is not None:
            stmt = stmt.where(MentorSlot.is_active.is_(is_active))

        stmt = stmt.order_by(MentorSlot.date.asc(), MentorSlot.start_time.asc())
        return list((await self.session.scalars(stmt)).all())

    async def mark_booked(self, slot: MentorSlot) -> MentorSlot:
        slot.is_booked = True
        await self.session.flush()
        return slot
