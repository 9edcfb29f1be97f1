"""Mentor profile schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SkillsValue = str | list[Any] | dict[str, Any]


class MentorProfileUpsert(BaseModel):
    """Create-or-update mentor profile request; omitted fields are left unchanged."""

    user_id: int | None = None
    username: str | None = Field(default=None, max_length=128)
    category: str | None = Field(default=None, max_length=128)
    bio: str | None = Field(default=None, max_length=5000)
    skills: SkillsValue | None = None
    other_skills: SkillsValue | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class MentorProfileWriteResult(BaseModel):
    """Outcome of a profile upsert."""

    message: str
    id: int
    created: bool


class MentorProfileDetail(BaseModel):
    """Mentor profile merged with user contact fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    username: str | None
    category: str | None
    bio: str | None
    skills: str | None
    other_skills: str | None
    resume: str | None
    hourly_rate: Decimal | None
    name: str
    email: str
    phone: str | None
    created_at: datetime
    updated_at: datetime
