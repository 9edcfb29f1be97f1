"""Mentor profile ORM models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin


class MentorProfile(BaseModelMixin, Base):
    """Mentor profile linked to user account."""

    __tablename__ = "mentor_profiles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    username: Mapped[str | None] = mapped_column(String(128), nullable=True)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON or free-form text, stored as sent.
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    other_skills: Mapped[str | None] = mapped_column(Text, nullable=True)
    resume: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    user = relationship("User", back_populates="mentor_profile")
