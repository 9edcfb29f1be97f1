"""Booking ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin
from app.core.enums import SessionTypeEnum

if TYPE_CHECKING:
    from app.modules.billing.models import Payment
    from app.modules.slots.models import MentorSlot


class Booking(BaseModelMixin, Base):
    """Reservation of a mentor slot by a user."""

    __tablename__ = "bookings"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentor_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Unique so that concurrent attempts on one slot resolve to a single booking.
    slot_id: Mapped[int] = mapped_column(
        ForeignKey("slots.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    session_type: Mapped[SessionTypeEnum] = mapped_column(
        SAEnum(SessionTypeEnum, name="session_type_enum", native_enum=False),
        default=SessionTypeEnum.STANDARD,
        nullable=False,
    )

    slot: Mapped["MentorSlot"] = relationship(back_populates="booking")
    payments: Mapped[list["Payment"]] = relationship(back_populates="booking", cascade="all, delete-orphan")
