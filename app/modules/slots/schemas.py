"""Slot schemas."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict


class SlotCreate(BaseModel):
    """Publish slot request; mentor_id defaults to the caller."""

    mentor_id: int | None = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time | None = None


class SlotRead(BaseModel):
    """Slot response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    mentor_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time | None
    is_booked: bool
    is_active: bool
