"""Booking repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SessionTypeEnum
from app.modules.bookings.models import Booking


class BookingsRepository:
    """DB operations for bookings."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_booking(
        self,
        user_id: int,
        mentor_id: int,
        slot_id: int,
        notes: str,
        session_type: SessionTypeEnum,
    ) -> Booking:
        booking = Booking(
            user_id=user_id,
            mentor_id=mentor_id,
            slot_id=slot_id,
            notes=notes,
            session_type=session_type,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def list_bookings_for_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        base_stmt: Select[tuple[Booking]] = select(Booking).where(Booking.user_id == user_id)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Booking.created_at.desc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return list(items), total
